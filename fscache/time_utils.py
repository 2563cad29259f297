"""
Time helpers shared by the reaper and its scheduler integration.

Principles:
1. "Now" is always a UTC aware datetime
2. Naive timestamps coming from a cache host are read as UTC
3. Durations may be given as timedelta or as plain seconds

Usage:
    from fscache.time_utils import as_timedelta, ensure_aware_utc, utcnow

    expiry = as_timedelta(3600)
    stale = ensure_aware_utc(entry.last_read) < utcnow() - expiry
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Union

__all__ = [
    "Duration",
    "as_timedelta",
    "ensure_aware_utc",
    "utcnow",
]

Duration = Union[timedelta, int, float]


def utcnow() -> datetime:
    """Return the current instant as a UTC aware datetime."""
    return datetime.now(timezone.utc)


def ensure_aware_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is timezone-aware.

    Naive values are assumed to be UTC. Aware values are returned as-is,
    comparisons between aware datetimes already account for the offset.

    Args:
        dt: datetime object (naive or aware)

    Returns:
        Timezone-aware datetime
    """
    if dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


def as_timedelta(value: Duration) -> timedelta:
    """
    Convert a duration given as timedelta or seconds into a timedelta.

    Zero and negative values are passed through untouched. Seconds beyond the
    timedelta range, infinities included, saturate at timedelta.max/min.

    Raises:
        TypeError: If value is neither a timedelta nor a real number
    """
    if isinstance(value, timedelta):
        return value
    # bool is an int subclass but never a meaningful duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"duration must be timedelta or seconds, got {type(value).__name__}")
    try:
        return timedelta(seconds=value)
    except OverflowError:
        return timedelta.max if value > 0 else timedelta.min
