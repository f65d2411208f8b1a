"""Environment-driven settings for the Ranking Reliability Engine.

Settings are read from ``RANKREL_*`` environment variables or a ``.env``
file, with CLI flags taking precedence.

Variables
- ``RANKREL_LOG_LEVEL``    (default ``WARNING``)
- ``RANKREL_LOG_FORMAT``   (``console`` or ``json``, default ``console``)
- ``RANKREL_WORKERS``      (threads for per-source evaluation, default 1)
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logs import LOG_FORMATS


class RankRelSettings(BaseSettings):
    """Settings for a single engine run."""

    model_config = SettingsConfigDict(
        env_prefix="RANKREL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console")
    workers: int = Field(default=1, ge=1)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")
        return value


def get_settings(**overrides: Any) -> RankRelSettings:
    """Load settings, applying any non-None overrides (e.g. from CLI flags)."""
    return RankRelSettings(**{k: v for k, v in overrides.items() if v is not None})
