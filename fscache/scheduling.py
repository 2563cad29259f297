"""APScheduler glue for hosts that sweep their cache on a reaper's cadence.

The sweep itself (iterating entries, calling `reap`, removing files) stays
with the host; this module only turns `Reaper.next()` into fire times.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from apscheduler.job import Job
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.base import BaseTrigger

from fscache.reaper import Reaper

logger = logging.getLogger(__name__)

# Floor for non-positive intervals so the scheduler never spins on one instant.
MIN_SWEEP_INTERVAL = timedelta(seconds=1)

DEFAULT_JOB_ID = "fscache.reaper.sweep"


class ReaperTrigger(BaseTrigger):
    """Fires right after loading (optionally) and then every `reaper.next()`.

    The reaper is asked for its interval on every computation, so reapers
    with a variable cadence are followed as well.
    """

    def __init__(self, reaper: Reaper, *, run_on_load: bool = True) -> None:
        self.reaper = reaper
        self.run_on_load = run_on_load

    def get_next_fire_time(
        self, previous_fire_time: Optional[datetime], now: datetime
    ) -> Optional[datetime]:
        if previous_fire_time is None:
            if self.run_on_load:
                return now
            return now + self._interval()
        return previous_fire_time + self._interval()

    def _interval(self) -> timedelta:
        interval = self.reaper.next()
        if interval < MIN_SWEEP_INTERVAL:
            logger.debug(
                "reaper.trigger.clamped",
                extra={"interval_seconds": interval.total_seconds()},
            )
            return MIN_SWEEP_INTERVAL
        return interval

    def __str__(self) -> str:
        return f"reaper[run_on_load={self.run_on_load}]"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} (reaper={self.reaper!r}, run_on_load={self.run_on_load})>"


def schedule_reaper(
    scheduler: BaseScheduler,
    func: Callable[..., Any],
    reaper: Reaper,
    *,
    job_id: str = DEFAULT_JOB_ID,
    run_on_load: bool = True,
    **job_kwargs: Any,
) -> Job:
    """Register `func` as the host's sweep job, paced by `reaper`.

    Overlapping sweeps are not allowed and missed runs collapse into one
    unless overridden through `job_kwargs`.
    """

    job_kwargs.setdefault("coalesce", True)
    job_kwargs.setdefault("max_instances", 1)
    job = scheduler.add_job(
        func,
        trigger=ReaperTrigger(reaper, run_on_load=run_on_load),
        id=job_id,
        replace_existing=True,
        **job_kwargs,
    )
    logger.info("reaper.sweep.scheduled", extra={"job_id": job_id, "run_on_load": run_on_load})
    return job


__all__ = ["DEFAULT_JOB_ID", "MIN_SWEEP_INTERVAL", "ReaperTrigger", "schedule_reaper"]
