"""Application configuration."""

import os
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    app_namespace: str = "food-diary-v1"
    app_name: str = "calorbunga"
    estimator_provider: str = "gemini"
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    estimator_max_attempts: int = 5
    estimator_initial_delay_seconds: float = 1.0
    estimator_backoff_multiplier: float = 2.0
    estimator_timeout_seconds: float = 30.0
    timezone: str = "UTC"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def local_clock(timezone_name: str) -> Callable[[], datetime]:
    """Return a callable giving the current time in the configured timezone."""
    tz = ZoneInfo(timezone_name)

    def now() -> datetime:
        return datetime.now(tz=tz)

    return now
