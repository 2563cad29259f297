"""Expiry policy deciding when cache streams are evicted.

A reaper is consulted by the cache host right after loading and then again
after every `next()` interval. For each tracked entry the host calls
`reap(key, last_read, last_write)` and removes the entry when it returns
True. Removal, locking and the sweep loop itself stay with the host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from fscache.time_utils import Duration, as_timedelta, ensure_aware_utc, utcnow

if TYPE_CHECKING:
    from fscache.settings import Settings

logger = logging.getLogger(__name__)

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
_LATEST = datetime.max.replace(tzinfo=timezone.utc)


class Reaper(Protocol):
    """Controls when streams expire from the cache."""

    def next(self) -> timedelta:
        """Return how long to wait before the next scheduled reaping."""
        ...

    def reap(self, key: str, last_read: datetime, last_write: datetime) -> bool:
        """Return True to remove the entry from the cache, False to keep it."""
        ...


class ReaperMode(str, Enum):
    LAST_READ = "last_read"
    LAST_WRITE = "last_write"


@dataclass(frozen=True)
class ThresholdReaper:
    """Reaper running every `period` and evicting entries older than `expiry`.

    Attributes:
        expiry: Maximum age of the tracked timestamp.
        period: Fixed interval between evaluation passes.
        mode: Which timestamp is compared against the cutoff.
        clock: Source of "now"; defaults to the UTC wall clock.
    """

    expiry: timedelta
    period: timedelta
    mode: ReaperMode = ReaperMode.LAST_READ
    clock: Callable[[], datetime] = field(default=utcnow, repr=False, compare=False)

    def next(self) -> timedelta:
        return self.period

    def cutoff(self) -> datetime:
        """Instant before which a tracked timestamp makes an entry reapable."""
        try:
            return self.clock() - self.expiry
        except OverflowError:
            # Past the datetime range: a huge expiry keeps everything, a huge
            # negative one reaps everything.
            return _EARLIEST if self.expiry > timedelta(0) else _LATEST

    def reap(self, key: str, last_read: datetime, last_write: datetime) -> bool:
        tracked = last_write if self.mode == ReaperMode.LAST_WRITE else last_read
        # Strictly before: an entry sitting exactly on the cutoff survives this pass.
        return ensure_aware_utc(tracked) < ensure_aware_utc(self.cutoff())


def new_reaper(
    expiry: Duration,
    period: Duration,
    *,
    clock: Optional[Callable[[], datetime]] = None,
) -> ThresholdReaper:
    """Return a reaper evicting entries whose last read is older than `expiry`.

    See `new_last_read_reaper`.
    """
    return new_last_read_reaper(expiry, period, clock=clock)


def new_last_read_reaper(
    expiry: Duration,
    period: Duration,
    *,
    clock: Optional[Callable[[], datetime]] = None,
) -> ThresholdReaper:
    """Return a reaper running every `period` that evicts entries not read within `expiry`."""
    return _build(expiry, period, ReaperMode.LAST_READ, clock)


def new_last_write_reaper(
    expiry: Duration,
    period: Duration,
    *,
    clock: Optional[Callable[[], datetime]] = None,
) -> ThresholdReaper:
    """Return a reaper running every `period` that evicts entries not written within `expiry`.

    Reads never extend an entry's life, which suits write-through caches.
    """
    return _build(expiry, period, ReaperMode.LAST_WRITE, clock)


def build_reaper(settings: Optional["Settings"] = None) -> ThresholdReaper:
    """Construct the reaper selected by application settings."""

    if settings is None:
        from fscache.settings import get_settings

        settings = get_settings()

    factory = (
        new_last_write_reaper
        if settings.reaper_mode == ReaperMode.LAST_WRITE
        else new_last_read_reaper
    )
    reaper = factory(settings.reaper_expiry_seconds, settings.reaper_period_seconds)
    logger.info(
        "reaper.configured",
        extra={
            "mode": reaper.mode.value,
            "expiry_seconds": reaper.expiry.total_seconds(),
            "period_seconds": reaper.period.total_seconds(),
        },
    )
    if reaper.expiry <= timedelta(0) or reaper.period <= timedelta(0):
        logger.debug(
            "Reaper configured with non-positive expiry (%s) or period (%s)",
            reaper.expiry,
            reaper.period,
        )
    return reaper


def _build(
    expiry: Duration,
    period: Duration,
    mode: ReaperMode,
    clock: Optional[Callable[[], datetime]],
) -> ThresholdReaper:
    return ThresholdReaper(
        expiry=as_timedelta(expiry),
        period=as_timedelta(period),
        mode=mode,
        clock=clock or utcnow,
    )


__all__ = [
    "Reaper",
    "ReaperMode",
    "ThresholdReaper",
    "build_reaper",
    "new_last_read_reaper",
    "new_last_write_reaper",
    "new_reaper",
]
