"""
Centralized configuration for the Tandem backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., MATCHMAKING_*, CHAT_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Tandem API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:9002", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # direct Postgres URI, used by run_migrations.py

    # Storage backend: "supabase" for deployments, "memory" for local development
    storage_backend: Literal["supabase", "memory"] = "supabase"

    # Matchmaking
    matchmaking_conflict_retries: int = 3
    matchmaking_stale_partner_retries: int = 1
    matchmaking_match_same_level: bool = False
    match_status_poll_interval: float = 2.0  # seconds

    # Chat
    chat_preview_length: int = 50
    chat_moderation_words: list[str] = ["badword1", "badword2", "scheisse", "arschloch"]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
