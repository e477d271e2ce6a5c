"""Application configuration."""

import os
import re

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_REMINDER_TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DEFAULT_GOAL_ML = 2000
DEFAULT_PRESETS = (200, 250, 500)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    supabase_access_token: str | None = None
    cache_path: str = ".hydrate/cache.json"
    remote_timeout_seconds: float = 10.0
    default_goal_ml: int = DEFAULT_GOAL_ML
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="HYDRATE_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def is_valid_reminder_time(raw: str) -> bool:
    """Return True for a 24h ``HH:MM`` time string."""
    return bool(_REMINDER_TIME.match(raw.strip()))
