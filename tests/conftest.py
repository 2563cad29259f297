import os
from datetime import datetime, timezone

import pytest

TEST_ENV = {
    "FSCACHE_REAPER_EXPIRY_SECONDS": "3600",
    "FSCACHE_REAPER_PERIOD_SECONDS": "600",
    "FSCACHE_REAPER_MODE": "last_read",
    "FSCACHE_REAPER_RUN_ON_LOAD": "1",
    "LOG_LEVEL": "INFO",
    "LOG_JSON": "0",
    "LOG_FILE": "",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def _reset_settings():
    """Force deterministic env for tests and reset cached settings."""

    for key, value in TEST_ENV.items():
        os.environ[key] = value

    from fscache import settings as settings_module
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    return lambda: now
