"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tool settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    # models.json generation
    models_mode: Literal["merge", "replace"] = "merge"

    model_config = SettingsConfigDict(
        env_prefix="OPENCLAW_MODELS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if value in (None, ""):
            return "INFO"
        return str(value).strip().upper()

    @field_validator("log_dir", mode="before")
    @classmethod
    def parse_log_dir(cls, value):
        if value in (None, ""):
            return None
        return Path(str(value)).expanduser()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
