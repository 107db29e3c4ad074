"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    classifier_provider: Literal["openai", "workers_ai"] = "openai"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    openai_vision_model: str = "gpt-4.1-mini"
    openai_store: bool = False
    cloudflare_account_id: str | None = None
    cloudflare_api_key: str | None = None
    workers_ai_base_url: str = "https://api.cloudflare.com/client/v4"
    workers_ai_text_model: str = "@cf/meta/llama-3.1-8b-instruct"
    workers_ai_vision_model: str = "@cf/meta/llama-3.2-11b-vision-instruct"
    item_source: Literal["json", "supabase"] = "json"
    items_dir: Path | None = None
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    fuzzy_threshold: float = 0.3
    max_query_length: int = 200
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def classifier_configured(self) -> bool:
        """Return True when the selected classifier provider has credentials."""
        if self.classifier_provider == "workers_ai":
            return bool(self.cloudflare_account_id and self.cloudflare_api_key)
        return bool(self.openai_api_key)
