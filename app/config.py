from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True, extra="ignore", populate_by_name=True
    )

    # Google Generative Language API
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias="GEMINI_API_KEY",
        description="Server-side key; checked on every request, not at startup.",
    )
    gemini_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta", validation_alias="GEMINI_BASE_URL"
    )
    image_edit_model: str = Field("gemini-2.5-flash-image-preview", validation_alias="GEMINI_IMAGE_EDIT_MODEL")
    text_to_image_model: str = Field("imagen-3.0-generate-002", validation_alias="GEMINI_TEXT_TO_IMAGE_MODEL")

    # Logging
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
