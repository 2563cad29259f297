from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache

from fscache.env import load_env
from fscache.reaper import ReaperMode


DEFAULT_REAPER_EXPIRY_SECONDS = 3600.0
DEFAULT_REAPER_PERIOD_SECONDS = 600.0


@dataclass(frozen=True)
class Settings:
    reaper_expiry_seconds: float
    reaper_period_seconds: float
    reaper_mode: ReaperMode
    reaper_run_on_load: bool
    log_level: str
    log_json: bool
    log_file: str


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return value


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_mode(name: str, default: ReaperMode = ReaperMode.LAST_READ) -> ReaperMode:
    raw = (os.getenv(name) or "").strip().lower().replace("-", "_")
    try:
        return ReaperMode(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_env()

    # Zero and negative durations are kept: the reaper resolves them arithmetically.
    reaper_expiry_seconds = _get_float("FSCACHE_REAPER_EXPIRY_SECONDS", DEFAULT_REAPER_EXPIRY_SECONDS)
    reaper_period_seconds = _get_float("FSCACHE_REAPER_PERIOD_SECONDS", DEFAULT_REAPER_PERIOD_SECONDS)
    reaper_mode = _get_mode("FSCACHE_REAPER_MODE")
    reaper_run_on_load = _get_bool("FSCACHE_REAPER_RUN_ON_LOAD", default=True)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    log_json = _get_bool("LOG_JSON", default=False)
    log_file = os.getenv("LOG_FILE", "").strip()

    return Settings(
        reaper_expiry_seconds=reaper_expiry_seconds,
        reaper_period_seconds=reaper_period_seconds,
        reaper_mode=reaper_mode,
        reaper_run_on_load=reaper_run_on_load,
        log_level=log_level,
        log_json=log_json,
        log_file=log_file,
    )


__all__ = ["Settings", "get_settings"]
