"""Structured log payloads for request-scoped background work."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Identifiers that tie a log line back to a transport request."""

    request_id: str | None = None
    reference_id: str | None = None
    actor_id: str | None = None
    task_id: str | None = None
    trace_id: str | None = None

    @classmethod
    def for_task(cls, task_key: str, context: Mapping[str, Any]) -> "LogContext":
        return cls(
            request_id=context.get("request_id"),
            reference_id=context.get("reference_id"),
            actor_id=context.get("actor_id"),
            task_id=context.get("task_id") or task_key,
            trace_id=context.get("trace_id"),
        )


def build_log_event(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Merge ``context`` and ``fields`` into one ``extra=`` payload."""
    payload: dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat(), "event": event}
    payload.update(asdict(context))
    payload.update(fields)
    return payload
