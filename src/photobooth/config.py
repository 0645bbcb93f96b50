"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_PROMPTS = [
    "Anime style portrait, clean line art, vibrant cel shading",
    "Soft watercolor portrait, loose brush strokes, paper texture",
    "Classical oil painting portrait, rich textures, warm lighting",
    "3D animated movie style portrait, expressive eyes, cinematic lighting",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "PhotoBooth"
    leonardo_api_key: str
    leonardo_base_url: str = "https://cloud.leonardo.ai/api/rest/v1"
    leonardo_model_id: str
    leonardo_style_id: str
    leonardo_prompts: list[str] = DEFAULT_PROMPTS
    generation_poll_interval_seconds: float = 3.0
    generation_poll_backoff: float = 1.0
    generation_poll_max_interval_seconds: float = 30.0
    generation_timeout_seconds: float | None = 600.0
    generation_poll_max_polls: int | None = None
    max_upload_bytes: int = 5 * 1024 * 1024
    share_default_expiry_seconds: int = 7 * 24 * 60 * 60
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("leonardo_prompts")
    @classmethod
    def _require_one_prompt_per_style(cls, value: list[str]) -> list[str]:
        cleaned = [prompt.strip() for prompt in value]
        if len(cleaned) != 4 or not all(cleaned):
            raise ValueError("leonardo_prompts must contain four non-empty prompts")
        return cleaned
