"""Application settings using pydantic-settings.

Settings are loaded from environment variables (or a ``.env`` file). The
database password and the session-signing secret have no defaults: a
deployment that omits them fails at startup instead of at first use.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        BRANDBRAIN_DB_HOST: Database host (default: localhost)
        BRANDBRAIN_DB_PORT: Database port (default: 5432)
        BRANDBRAIN_DB_DATABASE: Database name (default: brandbrain)
        BRANDBRAIN_DB_USERNAME: Database user (default: brandbrain)
        BRANDBRAIN_DB_PASSWORD: Database password (required)
        BRANDBRAIN_DB_POOL_SIZE: Connections kept in the pool (default: 10)
        BRANDBRAIN_DB_ECHO: Log emitted SQL (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="BRANDBRAIN_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="brandbrain", description="Database name")
    username: str = Field(default="brandbrain", description="Database username")
    password: SecretStr = Field(..., description="Database password")
    pool_size: int = Field(
        default=10,
        description="Connections kept in the pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL")

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class SessionSettings(BaseSettings):
    """Session cookie and token settings.

    Environment variables:
        BRANDBRAIN_SESSION_SECRET: HMAC secret for signed tokens (required)
        BRANDBRAIN_SESSION_COOKIE_NAME: Cookie name (default: session)
        BRANDBRAIN_SESSION_TTL_DAYS: Session lifetime (default: 7)
        BRANDBRAIN_SESSION_SECURE_COOKIE: Send cookie over HTTPS only (default: true)
        BRANDBRAIN_SESSION_RESET_TOKEN_TTL_MINUTES: Reset token lifetime (default: 30)
    """

    model_config = SettingsConfigDict(
        env_prefix="BRANDBRAIN_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret: SecretStr = Field(
        ...,
        description="HMAC secret used to sign session tokens",
        min_length=16,
    )
    cookie_name: str = Field(default="session", description="Session cookie name")
    ttl_days: int = Field(default=7, description="Session lifetime in days", ge=1)
    secure_cookie: bool = Field(
        default=True,
        description="Mark the session cookie Secure",
    )
    reset_token_ttl_minutes: int = Field(
        default=30,
        description="Password-reset token lifetime in minutes",
        ge=1,
    )


class AnalyzerSettings(BaseSettings):
    """Settings for the language-model analyzer and chat collaborator.

    Environment variables:
        BRANDBRAIN_ANALYZER_API_KEY: API key for the model provider (optional)
        BRANDBRAIN_ANALYZER_BASE_URL: OpenAI-compatible API base URL
        BRANDBRAIN_ANALYZER_MODEL: Model name (default: gpt-4o)
        BRANDBRAIN_ANALYZER_TIMEOUT_SECONDS: Per-call timeout (default: 10)
        BRANDBRAIN_ANALYZER_STALE_ANALYSIS_MINUTES: Age after which an
            in-progress analysis may be reclaimed (default: 5)
        BRANDBRAIN_ANALYZER_DEGRADE_ON_FAILURE: Store placeholder content when
            the analyzer fails instead of failing the run (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="BRANDBRAIN_ANALYZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Model provider API key",
    )
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible API base URL",
    )
    model: str = Field(default="gpt-4o", description="Model name")
    timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for every outbound model call",
        ge=1,
        le=120,
    )
    stale_analysis_minutes: int = Field(
        default=5,
        description="Minutes before an in-progress analysis counts as stale",
        ge=1,
    )
    degrade_on_failure: bool = Field(
        default=True,
        description="Serve placeholder analysis when the analyzer fails",
    )


class CacheSettings(BaseSettings):
    """In-process cache settings.

    Environment variables:
        BRANDBRAIN_CACHE_WORKSPACE_TTL_SECONDS: Workspace lookup TTL (default: 30)
    """

    model_config = SettingsConfigDict(
        env_prefix="BRANDBRAIN_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workspace_ttl_seconds: float = Field(
        default=30.0,
        description="Time-to-live of cached workspace lookups",
        ge=0,
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BRANDBRAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Brand Brain API", description="Application name")
    debug: bool = Field(
        default=False,
        description="Debug mode; echoes internal error detail in 500 responses",
    )
    environment: str = Field(default="production", description="Deployment name")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Raises:
        pydantic.ValidationError: If BRANDBRAIN_DB_PASSWORD is not set.
    """
    return DatabaseSettings()  # type: ignore[call-arg]


@lru_cache
def get_session_settings() -> SessionSettings:
    """Get cached session settings.

    Raises:
        pydantic.ValidationError: If BRANDBRAIN_SESSION_SECRET is not set.
    """
    return SessionSettings()  # type: ignore[call-arg]


@lru_cache
def get_analyzer_settings() -> AnalyzerSettings:
    """Get cached analyzer settings."""
    return AnalyzerSettings()


@lru_cache
def get_cache_settings() -> CacheSettings:
    """Get cached in-process cache settings."""
    return CacheSettings()
