"""Configuration loading for the Rounds quiz core.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Announcement ("What's New") configuration
    whats_new_url: str = Field(
        default="https://raw.githubusercontent.com/thisisalimirza/rounds-its/main/whats-new.json",
        description="Raw URL of the announcement JSON document",
    )
    whats_new_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for the remote announcement fetch in seconds",
    )

    # Local persistence
    kv_store_path: str = Field(
        default="./data/rounds.db",
        description="SQLite file holding the announcement cache and seen marker",
    )

    # Name sources
    registry_path: str = Field(
        default="",
        description="Diagnosis registry JSON file (empty uses the packaged registry)",
    )
    case_library_path: str = Field(
        default="",
        description="Case library JSON file (empty uses the packaged cases)",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["cli", "check"] = Field(
        default="cli",
        description="Run mode",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("whats_new_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure fetch timeout is positive."""
        if v <= 0:
            raise ValueError("whats_new_timeout_seconds must be positive")
        return v

    @field_validator("whats_new_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensure the announcement URL is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("whats_new_url must start with http:// or https://")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
