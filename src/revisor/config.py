"""
Configuration settings for revisor.

Uses Pydantic Settings: values come from ``REVISOR_*`` environment variables
or a ``.env`` file.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: str = Field(
        default=str(Path.home() / ".revisor" / "revisor.db"),
        description="SQLite database file",
    )
    weekly_available_days: int = Field(
        default=5,
        ge=0,
        le=7,
        description="Study days per week; sets the daily review capacity",
    )
    lock_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="How long a write waits for another write on the same theme",
    )
    log_level: str = Field(default="WARNING", description="loguru level for stderr")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
