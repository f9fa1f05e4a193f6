"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator

import pytest

# Set test environment before any app code runs
os.environ["GEO_ENV"] = "test"
os.environ["GEO_LOG_LEVEL"] = "WARNING"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Make every test read settings from the current environment."""
    from geoscore.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings for the test environment."""
    from geoscore.config import get_settings

    return get_settings()
