"""Central configuration loaded from environment variables and an optional .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TWOFA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Clock
    tick_interval: float = Field(default=1.0, gt=0)

    # Logging (the TUI owns the terminal, so a file is usually wanted)
    log_level: str = "WARNING"
    log_file: Path | None = None

    # Terminal
    alt_screen: bool = True

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


settings = Settings()
