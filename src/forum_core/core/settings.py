"""Application settings and configuration.

This module defines all configuration options for the forum core.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Forum Core", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./forum.db", alias="DATABASE_URL")
    database_timeout_seconds: float = Field(default=5.0, alias="FORUM_DB_TIMEOUT_SECONDS")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Password hashing cost factor
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, alias="FORUM_BCRYPT_ROUNDS")

    # Sessions
    session_hours: int = Field(default=24, ge=0, alias="FORUM_SESSION_HOURS")
    session_sweep_minutes: float = Field(default=30.0, gt=0, alias="FORUM_SESSION_SWEEP_MINUTES")
    session_cookie_name: str = Field(default="session_token", alias="FORUM_SESSION_COOKIE")
    cookie_secure: bool = Field(default=False, alias="FORUM_COOKIE_SECURE")

    # Rate limiting (fixed window per client host)
    rate_limit_window_seconds: float = Field(
        default=60.0,
        gt=0,
        alias="FORUM_RATE_LIMIT_WINDOW_SECONDS",
    )
    rate_limit_max_requests: int = Field(
        default=20,
        ge=1,
        alias="FORUM_RATE_LIMIT_MAX_REQUESTS",
    )

    # Periodic session expiry and rate-limit eviction
    background_sweeps: bool = Field(default=True, alias="FORUM_BACKGROUND_SWEEPS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def session_ttl(self) -> timedelta:
        """Return the configured session lifetime."""
        return timedelta(hours=self.session_hours)

    @property
    def session_sweep_interval_seconds(self) -> float:
        """Return the expiry sweep interval in seconds."""
        return self.session_sweep_minutes * 60


settings = Settings()
