"""Scheduled expiry sweeps."""

from __future__ import annotations

import logging
from typing import Any

from freightmatch.database.db import get_db_session
from freightmatch.services.empty_return_service import EmptyReturnService
from freightmatch.services.request_service import RequestLifecycleService
from freightmatch.tasks.celery_app import celery_app
from freightmatch.tasks.hooks import after_task, before_task

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="maintenance.expire_stale_requests")
def expire_stale_requests_task(self) -> dict[str, Any]:
    context = {"task_id": getattr(self.request, "id", None)}
    logger.info("task.start", extra=before_task("maintenance.expire_stale_requests", context))
    with get_db_session() as session:
        expired = RequestLifecycleService(session).expire_stale_requests()
    logger.info("task.finish", extra=after_task("maintenance.expire_stale_requests", context, status="succeeded"))
    return {"expired": expired}


@celery_app.task(bind=True, name="maintenance.expire_empty_returns")
def expire_empty_returns_task(self) -> dict[str, Any]:
    context = {"task_id": getattr(self.request, "id", None)}
    logger.info("task.start", extra=before_task("maintenance.expire_empty_returns", context))
    with get_db_session() as session:
        expired = EmptyReturnService(session).expire_empty_returns()
    logger.info("task.finish", extra=after_task("maintenance.expire_empty_returns", context, status="succeeded"))
    return {"expired": expired}
