"""
UTC time helpers.

Rules:
- Naive `datetime` (no tzinfo) is assumed to be **UTC**.
- Aware datetimes are converted to UTC before any calendar math.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"Expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day_window(now: datetime | None = None) -> Tuple[datetime, datetime]:
    """
    Half-open interval `[start, end)` covering the UTC calendar day of `now`.

    Example:
        >>> utc_day_window(datetime(2024, 3, 5, 17, 45, tzinfo=timezone.utc))
        (datetime.datetime(2024, 3, 5, 0, 0, tzinfo=datetime.timezone.utc), datetime.datetime(2024, 3, 6, 0, 0, tzinfo=datetime.timezone.utc))
    """
    current = ensure_utc(now) if now is not None else utc_now()
    start = current.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
