"""Start/finish log payloads shared by every Celery task."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from freightmatch.core.logging import LogContext, build_log_event


def before_task(task_key: str, context: dict[str, Any]) -> dict[str, Any]:
    return build_log_event("task.start", LogContext.for_task(task_key, context), task_key=task_key)


def after_task(task_key: str, context: dict[str, Any], status: str) -> dict[str, Any]:
    return build_log_event(
        "task.finish",
        LogContext.for_task(task_key, context),
        task_key=task_key,
        status=status,
        finished_at=datetime.now(timezone.utc).isoformat(),
    )
