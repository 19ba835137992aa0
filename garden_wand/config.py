"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    garden_wand_env: str = "development"
    garden_wand_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Wand defaults
    default_tolerance: int = 32
    default_max_pixels: int = 200_000

    # Extraction result cache (entries)
    cache_size: int = 32

    # Reject uploads larger than this many pixels (~ 50 megapixels)
    max_image_pixels: int = 50_000_000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
