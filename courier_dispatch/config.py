"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./courier_dispatch.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify the bearer tokens of incoming requests",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to store and report timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser",
    )

    # Dispatch policy
    heartbeat_timeout_seconds: int = Field(
        default=120,
        description="Seconds after the last heartbeat before a driver stops being available",
        gt=0,
    )
    mailbox_capacity: int = Field(
        default=50,
        description="Maximum number of notifications retained per driver mailbox",
        gt=0,
    )
    notification_retention_days: int = Field(
        default=7,
        description="Age in days after which notifications are purged",
        gt=0,
    )
    retention_sweep_interval_seconds: int = Field(
        default=3600,
        description="Seconds between two runs of the retention sweeper",
        gt=0,
    )
    enable_retention_sweeper: bool = Field(
        default=True,
        description="Start the retention sweeper together with the API application",
    )
    expire_stale_presence: bool = Field(
        default=True,
        description="Let the retention sweeper mark drivers with stale heartbeats offline",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
