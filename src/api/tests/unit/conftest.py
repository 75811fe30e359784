"""Unit test fixtures shared across bounded contexts."""

import pytest

from infrastructure.settings import (
    get_analyzer_settings,
    get_cache_settings,
    get_database_settings,
    get_session_settings,
    get_settings,
)

_CACHED_SETTINGS = (
    get_settings,
    get_database_settings,
    get_session_settings,
    get_analyzer_settings,
    get_cache_settings,
)


@pytest.fixture(autouse=True)
def isolated_settings():
    """Drop cached settings so environment changes in one test never leak."""
    for getter in _CACHED_SETTINGS:
        getter.cache_clear()
    yield
    for getter in _CACHED_SETTINGS:
        getter.cache_clear()
