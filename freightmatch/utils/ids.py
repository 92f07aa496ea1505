"""Identifier generation helpers."""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timezone

REFERENCE_PREFIX = "CMD"


def new_id() -> str:
    """Create a UUID4-based opaque identifier."""
    return str(uuid.uuid4())


def new_reference_id(now: datetime | None = None) -> str:
    """Create a human readable request reference, e.g. ``CMD-2026-04821``."""
    year = (now or datetime.now(timezone.utc)).year
    return f"{REFERENCE_PREFIX}-{year}-{secrets.randbelow(100000):05d}"
