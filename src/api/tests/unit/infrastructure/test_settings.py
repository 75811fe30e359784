"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import (
    AnalyzerSettings,
    CacheSettings,
    DatabaseSettings,
    SessionSettings,
    Settings,
    get_database_settings,
    get_session_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment variables out of settings under test."""
    for name in (
        "BRANDBRAIN_DB_PASSWORD",
        "BRANDBRAIN_DB_POOL_SIZE",
        "BRANDBRAIN_SESSION_SECRET",
        "BRANDBRAIN_ANALYZER_API_KEY",
        "BRANDBRAIN_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    get_database_settings.cache_clear()
    get_session_settings.cache_clear()
    yield
    get_database_settings.cache_clear()
    get_session_settings.cache_clear()


class TestDatabaseSettings:
    """Tests for database connection settings."""

    def test_password_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(_env_file=None)

        assert "password" in str(exc_info.value)

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("BRANDBRAIN_DB_PASSWORD", "s3cret")
        monkeypatch.setenv("BRANDBRAIN_DB_POOL_SIZE", "4")

        settings = DatabaseSettings(_env_file=None)

        assert settings.password.get_secret_value() == "s3cret"
        assert settings.pool_size == 4

    def test_connection_string_hides_password(self):
        settings = DatabaseSettings(password="s3cret", _env_file=None)

        assert settings.connection_string == (
            "postgresql://brandbrain@localhost:5432/brandbrain"
        )
        assert "s3cret" not in settings.connection_string

    @pytest.mark.parametrize("pool_size", [0, 101])
    def test_pool_size_bounds(self, pool_size):
        with pytest.raises(ValidationError):
            DatabaseSettings(password="x", pool_size=pool_size, _env_file=None)

    def test_cached_getter_fails_without_password(self):
        with pytest.raises(ValidationError):
            get_database_settings()


class TestSessionSettings:
    def test_secret_is_required(self):
        with pytest.raises(ValidationError):
            SessionSettings(_env_file=None)

    def test_short_secret_is_rejected(self):
        with pytest.raises(ValidationError):
            SessionSettings(secret="too-short", _env_file=None)

    def test_defaults(self):
        settings = SessionSettings(secret="x" * 32, _env_file=None)

        assert settings.cookie_name == "session"
        assert settings.ttl_days == 7
        assert settings.secure_cookie is True
        assert settings.reset_token_ttl_minutes == 30


class TestAnalyzerSettings:
    def test_defaults(self):
        settings = AnalyzerSettings(_env_file=None)

        assert settings.api_key is None
        assert settings.timeout_seconds == 10.0
        assert settings.stale_analysis_minutes == 5
        assert settings.degrade_on_failure is True

    def test_timeout_bounds(self):
        with pytest.raises(ValidationError):
            AnalyzerSettings(timeout_seconds=0, _env_file=None)


class TestOtherSettings:
    def test_cache_ttl_may_be_zero(self):
        assert CacheSettings(workspace_ttl_seconds=0, _env_file=None).workspace_ttl_seconds == 0

    def test_app_settings_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.app_name == "Brand Brain API"
        assert settings.debug is False
