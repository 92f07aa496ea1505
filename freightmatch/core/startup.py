"""Process startup: logging, database reachability and schema bootstrap."""

from __future__ import annotations

import logging

from freightmatch.core.config import get_config
from freightmatch.core.logging_config import configure_logging
from freightmatch.database.db import create_schema, get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)


def _database_scheme(url: str) -> str:
    return url.split("://", 1)[0]


def validate_startup_config() -> None:
    """Refuse to start when a required database is unreachable."""
    config = get_config()
    scheme = _database_scheme(get_active_database_url())

    if not verify_database_connection():
        if config.DB_CONNECTIVITY_REQUIRED:
            raise RuntimeError("Database connectivity check failed.")
        logger.warning(
            "startup.database.unreachable",
            extra={"event": "startup.database.unreachable", "database_url_scheme": scheme},
        )

    if config.is_production and scheme == "sqlite":
        logger.warning("startup.production.sqlite_detected", extra={"event": "startup.production.sqlite_detected"})

    logger.info(
        "startup.matching.settings",
        extra={
            "event": "startup.matching.settings",
            "env": config.ENV,
            "database_url_scheme": scheme,
            "default_commission_percentage": config.DEFAULT_COMMISSION_PERCENTAGE,
            "recommendation_limit": config.RECOMMENDATION_LIMIT,
            "active_window_days": config.ACTIVE_WINDOW_DAYS,
            "request_expiry_days": config.REQUEST_EXPIRY_DAYS,
        },
    )


def bootstrap() -> None:
    configure_logging()
    validate_startup_config()
    # Local SQLite runs have no migration step.
    if get_active_database_url().startswith("sqlite"):
        create_schema()
