"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from espresso_tracker.services.recommendation_store import RECOMMENDATION_KEY_PREFIX
from espresso_tracker.services.recommendations import DEFAULT_DOSE_GRAMS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    default_dose: float = DEFAULT_DOSE_GRAMS
    recommendation_key_prefix: str = RECOMMENDATION_KEY_PREFIX
    preferences_table: str = "preferences"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
