"""Configuration loading for model-search."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel


class AppConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    thingiverse_api_key: str = ""
    request_timeout_s: float = 20.0
    popular_cache_ttl_s: float = 5 * 60
    image_cache_ttl_s: float = 30 * 60
    image_cache_max_entries: int = 100
    log_level: str = "INFO"


def load_config(env_path: str | Path | None = None) -> AppConfig:
    """Load configuration from environment variables (.env file)."""
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    return AppConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        thingiverse_api_key=os.getenv("THINGIVERSE_API_KEY", ""),
        request_timeout_s=float(os.getenv("REQUEST_TIMEOUT_S", "20.0")),
        popular_cache_ttl_s=float(os.getenv("POPULAR_CACHE_TTL_S", "300")),
        image_cache_ttl_s=float(os.getenv("IMAGE_CACHE_TTL_S", "1800")),
        image_cache_max_entries=int(os.getenv("IMAGE_CACHE_MAX_ENTRIES", "100")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
