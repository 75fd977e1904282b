from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    slack_token: str = Field(..., alias="SLACK_TOKEN")
    slack_channel: str = Field(..., alias="SLACK_CHANNEL")
    storage_dir: str = Field("storage", alias="STORAGE_DIR")
    http_timeout_s: float = Field(30.0, alias="HTTP_TIMEOUT")
    poll_interval_min: int = Field(30, alias="POLL_INTERVAL_MIN")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    @field_validator("slack_token", "slack_channel")
    @classmethod
    def _non_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name.upper()} must be a non-empty string")
        return v.strip()

    @field_validator("http_timeout_s", "poll_interval_min")
    @classmethod
    def _positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
