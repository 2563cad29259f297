import logging
from datetime import timedelta

import pytest

from fscache.reaper import ReaperMode, build_reaper
from fscache.settings import get_settings


def test_defaults_from_test_env():
    settings = get_settings()
    assert settings.reaper_expiry_seconds == 3600.0
    assert settings.reaper_period_seconds == 600.0
    assert settings.reaper_mode is ReaperMode.LAST_READ
    assert settings.reaper_run_on_load is True
    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert settings.log_file == ""


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", "5")
    assert get_settings() is first

    get_settings.cache_clear()
    assert get_settings().reaper_expiry_seconds == 5.0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("last_write", ReaperMode.LAST_WRITE),
        ("LAST-WRITE", ReaperMode.LAST_WRITE),
        (" last_read ", ReaperMode.LAST_READ),
        ("lru", ReaperMode.LAST_READ),
        ("", ReaperMode.LAST_READ),
    ],
)
def test_mode_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("FSCACHE_REAPER_MODE", raw)
    assert get_settings().reaper_mode is expected


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", "an hour")
    monkeypatch.delenv("FSCACHE_REAPER_PERIOD_SECONDS")
    settings = get_settings()
    assert settings.reaper_expiry_seconds == 3600.0
    assert settings.reaper_period_seconds == 600.0


def test_non_positive_numbers_are_kept(monkeypatch):
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", "0")
    monkeypatch.setenv("FSCACHE_REAPER_PERIOD_SECONDS", "-30")
    settings = get_settings()
    assert settings.reaper_expiry_seconds == 0.0
    assert settings.reaper_period_seconds == -30.0


def test_run_on_load_can_be_disabled(monkeypatch):
    monkeypatch.setenv("FSCACHE_REAPER_RUN_ON_LOAD", "off")
    assert get_settings().reaper_run_on_load is False


def test_build_reaper_from_env(monkeypatch, caplog):
    monkeypatch.setenv("FSCACHE_REAPER_MODE", "last_write")
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", "120")
    monkeypatch.setenv("FSCACHE_REAPER_PERIOD_SECONDS", "15")

    with caplog.at_level(logging.INFO, logger="fscache.reaper"):
        reaper = build_reaper()

    assert reaper.mode is ReaperMode.LAST_WRITE
    assert reaper.expiry == timedelta(minutes=2)
    assert reaper.next() == timedelta(seconds=15)

    record = next(r for r in caplog.records if r.getMessage() == "reaper.configured")
    assert record.mode == "last_write"
    assert record.expiry_seconds == 120.0
    assert record.period_seconds == 15.0


def test_build_reaper_accepts_aggressive_config_quietly(monkeypatch, caplog):
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", "0")
    monkeypatch.setenv("FSCACHE_REAPER_PERIOD_SECONDS", "-1")

    with caplog.at_level(logging.DEBUG, logger="fscache.reaper"):
        reaper = build_reaper()

    assert reaper.expiry == timedelta(0)
    assert reaper.next() == timedelta(seconds=-1)
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


@pytest.mark.parametrize("raw", ["inf", "-inf", "nan", "Infinity"])
def test_non_finite_numbers_fall_back_to_defaults(monkeypatch, raw):
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", raw)
    monkeypatch.setenv("FSCACHE_REAPER_PERIOD_SECONDS", raw)

    reaper = build_reaper()

    assert reaper.expiry == timedelta(hours=1)
    assert reaper.period == timedelta(minutes=10)


def test_build_reaper_saturates_huge_expiry(monkeypatch, now):
    monkeypatch.setenv("FSCACHE_REAPER_EXPIRY_SECONDS", "1e20")

    reaper = build_reaper()

    assert reaper.expiry == timedelta.max
    assert reaper.reap("k", now, now) is False


def test_build_reaper_accepts_explicit_settings():
    settings = get_settings()
    reaper = build_reaper(settings)
    assert reaper.mode is ReaperMode.LAST_READ
    assert reaper.expiry == timedelta(hours=1)
    assert reaper.period == timedelta(minutes=10)
