"""Date normalization helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime | None) -> datetime | None:
    """Return a timezone-aware UTC instant; naive values are read as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day(value: datetime) -> date:
    return to_utc(value).date()


def same_calendar_day(left: datetime | None, right: datetime | None) -> bool:
    if left is None or right is None:
        return False
    return utc_day(left) == utc_day(right)
