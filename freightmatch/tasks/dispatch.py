"""Post-commit event dispatch onto the Celery queue."""

from __future__ import annotations

import logging
from typing import Any

from freightmatch.tasks.notification_tasks import dispatch_request_event

logger = logging.getLogger(__name__)


class CeleryEventDispatcher:
    """Queues each committed request event for notification fan-out."""

    def publish(self, message: dict[str, Any]) -> None:
        task = dispatch_request_event.delay(message)
        logger.info(
            "events.dispatched",
            extra={
                "event": "events.dispatched",
                "request_id": message.get("request_id"),
                "event_type": message.get("event_type"),
                "task_id": getattr(task, "id", None),
            },
        )


def get_event_dispatcher() -> CeleryEventDispatcher:
    return CeleryEventDispatcher()
