"""Celery application bootstrap."""

from __future__ import annotations

from celery import Celery
from celery.signals import setup_logging

from freightmatch.core.config import get_config
from freightmatch.core.logging_config import configure_logging

config = get_config()

celery_app = Celery(
    "freightmatch",
    broker=config.CELERY_BROKER_URL,
    backend=config.CELERY_RESULT_BACKEND,
    include=[
        "freightmatch.tasks.notification_tasks",
        "freightmatch.tasks.maintenance_tasks",
    ],
)
celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    beat_schedule={
        "expire-stale-requests": {
            "task": "maintenance.expire_stale_requests",
            "schedule": 3600.0,
        },
        "expire-empty-returns": {
            "task": "maintenance.expire_empty_returns",
            "schedule": 3600.0,
        },
    },
)

# Eager mode runs tasks inline, without a broker.
if config.CELERY_TASK_ALWAYS_EAGER:
    celery_app.conf.task_always_eager = True


@setup_logging.connect
def configure_worker_logging(**kwargs) -> None:
    """Workers log through the same JSON handlers as the API."""
    configure_logging()
