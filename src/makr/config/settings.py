"""Process settings for makr, read from ``MAKR_*`` environment variables.

These are distinct from the user settings persisted in the state document
(clone path, default branch, token), which are edited with ``makr init``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Environment-driven settings."""

    model_config = SettingsConfigDict(
        env_prefix="MAKR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config" / "makr",
        description="Directory holding config.json",
    )
    log_level: str = Field(default="WARNING", description="Logging level for the makr logger")
    github_api_url: str = Field(default="https://api.github.com")
    http_timeout: float = Field(default=30.0, gt=0, description="GitHub API timeout in seconds")
    github_token: str | None = Field(
        default=None,
        description="Used when the state document holds no token",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("config_dir")
    @classmethod
    def _expand_config_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def config_path(self) -> Path:
        """Location of the state document."""
        return self.config_dir / "config.json"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


def clear_settings_cache() -> None:
    """Forget cached settings (tests and env changes)."""
    get_settings.cache_clear()
