"""
Application settings.

Values come from environment variables (or a local ``.env`` file). The IUCN
token is read from ``RED_LIST_API_KEY``; everything else has a development
default.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the API server and offline flows."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "redlist-dashboard"
    app_env: Literal["dev", "test", "staging", "prod"] = "dev"
    debug: bool = False

    log_level: str = "INFO"
    json_logs: bool = True

    # Snapshot files (redlist-*.json, gbif-*.csv) live here
    data_dir: Path = Path("data")
    charts_file: str = "plant_species_counts.csv"

    cache_ttl_seconds: float = Field(default=60 * 60, gt=0)
    outdated_after_years: int = 10

    red_list_api_key: str | None = None
    openalex_mailto: str = "red-list-dashboard@example.com"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Thread pool size for parallel upstream requests
    max_workers: int = 16

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance. Tests may call ``cache_clear()``."""
    return Settings()
