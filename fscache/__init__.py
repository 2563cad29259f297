"""Expiry policy for a file/stream cache.

Host-facing modules:
    fscache.reaper: the `Reaper` contract, `ThresholdReaper` and its factories
    fscache.settings: environment-driven configuration (`get_settings`)
    fscache.logging: process logging setup (`configure_logging`)
    fscache.scheduling: APScheduler glue (`ReaperTrigger`, `schedule_reaper`)
"""

from fscache.reaper import (
    Reaper,
    ReaperMode,
    ThresholdReaper,
    build_reaper,
    new_last_read_reaper,
    new_last_write_reaper,
    new_reaper,
)

__version__ = "0.1.0"

__all__ = [
    "Reaper",
    "ReaperMode",
    "ThresholdReaper",
    "build_reaper",
    "new_last_read_reaper",
    "new_last_write_reaper",
    "new_reaper",
]
