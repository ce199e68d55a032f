"""Datetime utilities.

Storage and comparisons use timezone-aware datetimes. Calendar arithmetic
(which date a draw belongs to, when a window opens) happens in the configured
draw timezone, never in host-local time.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def ensure_aware(dt: datetime) -> datetime:
    """Reject naive datetimes instead of guessing their zone."""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValueError(f"Naive datetime not allowed: {dt.isoformat()}")
    return dt
