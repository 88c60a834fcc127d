"""
Configuration management for Task Sync.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root, variables prefixed with TASK_SYNC_.
"""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Process-level settings loaded from environment variables.

    These are distinct from the user-facing plugin settings
    (see task_sync.models.settings.TaskSyncSettings), which are persisted
    by the host application and change at runtime.
    """

    # Python & Application
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Persistence
    data_file: str = Field(
        default="./data/task_sync.json",
        description="JSON file backing plugin data and the schema cache"
    )
    cache_ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="Time to live for cached integration data (0 disables expiry)"
    )
    cache_version: str = Field(
        default="1.0.0",
        description="Schema version stamped on cache entries; bump to invalidate"
    )

    # Event dispatch
    event_handler_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds a single event handler may run before it is abandoned"
    )

    # GitHub
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL"
    )
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP request timeout in seconds"
    )

    model_config = SettingsConfigDict(
        env_prefix="TASK_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.python_env == "production"

    def validate_production_config(self) -> None:
        """
        Validate configuration for production environment.

        Raises:
            ValueError: If required production settings are missing or invalid
        """
        if not self.is_production:
            return

        errors = []

        if not self.github_api_url.startswith("https://"):
            errors.append("TASK_SYNC_GITHUB_API_URL must use https in production.")

        if self.log_level == "DEBUG":
            errors.append("TASK_SYNC_LOG_LEVEL=DEBUG is not allowed in production.")

        if errors:
            raise ValueError("Production configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Use this function throughout the application to access settings.

    Example:
        >>> from task_sync.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.data_file)
    """
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
