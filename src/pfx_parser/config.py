"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables
  - Fall back to a .env file
  - Validate types and constraints at startup
  - Keep the container password out of logs (SecretStr)

Only AppSettings is a BaseSettings instance. PfxSettings is a plain BaseModel
populated via env_nested_delimiter="__", so PFX__PATH maps to pfx.path and
PFX__PASSWORD maps to pfx.password.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class PfxSettings(BaseModel):
    """
    Default container for the command-line entry point.

    Both values can be overridden on the command line.
    """

    path: Path | None = Field(default=None, description="Path to the .pfx/.p12 file")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Container password; empty for unprotected containers",
    )


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    pfx: PfxSettings = Field(default_factory=lambda: PfxSettings())

    expiring_soon_days: int = Field(
        default=30,
        ge=0,
        description="Days before not_after at which a valid certificate counts as expiring soon",
    )
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize to upper case and reject names the logging module does not know."""
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}"
            )
        return level
