"""Configuration management for the portfolio blog backend.

Loads settings from .env file with Pydantic validation. Supports dual-database mode
(SQLite for tests and local development, Supabase for production).
"""
import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Use DATABASE_URL for SQLite (tests), or SUPABASE_URL/KEY for production.
    ADMIN_EMAIL names the single account allowed to manage blog posts.
    """
    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        case_sensitive=True,
        extra="ignore",
    )

    # Database (SQLite for tests, Supabase for production)
    DATABASE_URL: Optional[str] = None  # SQLite: sqlite:///./blog.db

    # Supabase (optional if using SQLite for tests)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""  # service_role key for backend
    SUPABASE_ANON_KEY: str = ""  # anon/public key

    # The one admin identity; unset means every admin check fails closed
    ADMIN_EMAIL: Optional[str] = None

    # CORS - strict allowlist
    # SITE_URL also contributes its www/non-www twin
    SITE_URL: str = ""
    FRONTEND_URL: str = "http://localhost:5173"
    PRODUCTION_URL: str = ""

    # Test mode settings
    TEST_MODE: bool = False


@lru_cache()
def get_settings(env_file: str = ".env") -> Settings:
    """Get cached settings instance.

    Uses LRU cache to avoid re-parsing .env on every import.
    Allows env_file override for testing with isolated configurations.
    """
    return Settings(_env_file=env_file)


def load_settings_from_env() -> Settings:
    """Build a fresh, uncached settings instance.

    Request-time checks use this so environment patches in tests are observed.
    """
    return Settings(_env_file=os.getenv("ENV_FILE", ".env"))


# Default settings instance (respects ENV_FILE when set)
settings = get_settings(os.getenv("ENV_FILE", ".env"))
