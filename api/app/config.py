# api/app/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application configuration.

    Loads environment variables from `.env` and provides
    typed access across API, background tasks, and services.
    """

    # ─────────────────────────────────────────────
    # Pydantic Settings Config
    # ─────────────────────────────────────────────
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ─────────────────────────────────────────────
    # Database
    # ─────────────────────────────────────────────
    database_url: str
    database_auto_create: bool = True

    # ─────────────────────────────────────────────
    # OpenAI
    # ─────────────────────────────────────────────
    openai_api_key: str
    openai_model: str = "gpt-4o-mini"
    enrichment_timeout_seconds: float = 15.0

    # ─────────────────────────────────────────────
    # API
    # ─────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    api_base_url: str = "http://localhost:3001/api"
    cors_origins: str = "*"
    frontend_dist_path: str | None = None

    # ─────────────────────────────────────────────
    # Media Storage
    # ─────────────────────────────────────────────
    media_backend: str = "local"  # local | s3
    media_storage_path: str = "uploads"
    media_url_prefix: str = "/uploads"
    max_media_files: int = 10
    max_media_bytes: int = 10 * 1024 * 1024

    s3_bucket_name: str | None = None
    s3_public_base_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_region: str = "us-east-1"

    # ─────────────────────────────────────────────
    # Derived Properties
    # ─────────────────────────────────────────────
    @property
    def media_dir(self) -> Path:
        """
        Ensures media storage directory exists
        and returns Path object.
        """
        p = Path(self.media_storage_path)
        p.mkdir(parents=True, exist_ok=True)
        return p

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# ─────────────────────────────────────────────
# Cached Settings Instance
# ─────────────────────────────────────────────
@lru_cache
def get_settings() -> Settings:
    """
    Returns a cached Settings instance so config
    is only loaded once per process.
    """
    return Settings()
