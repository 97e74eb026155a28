import math
from datetime import date, datetime, timezone
from typing import Optional

from dateutil import parser as duparser


def to_instant(value) -> Optional[datetime]:
    """
    Converts a timestamp-like value into an aware UTC datetime.
    Returns None when the value cannot be read as a point in time.

    - aware datetime -> converted to UTC
    - naive datetime -> taken as UTC
    - date           -> UTC midnight of that day
    - int / float    -> epoch milliseconds
    - str            -> parsed with dateutil
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            parsed = duparser.parse(value)
        except (ValueError, OverflowError):
            return None
        return to_instant(parsed)

    return None


def is_valid_instant(value) -> bool:
    return to_instant(value) is not None


def to_iso(instant: datetime) -> str:
    """UTC ISO-8601 with milliseconds, e.g. 2024-07-10T00:00:00.000Z"""
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
