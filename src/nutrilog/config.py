"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "nutrilog.db"
    supabase_url: str
    supabase_anon_key: str
    openai_api_key: str
    openai_text_model: str = "gpt-4o-mini"
    openai_image_model: str = "gpt-4o"
    openai_store: bool = False
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def fdc_enabled(self) -> bool:
        """Return True when a FoodData Central key is configured."""
        return bool(self.fdc_api_key and self.fdc_api_key.strip())
