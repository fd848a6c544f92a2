"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from grammar_drills.config import settings

    # Access settings
    db_url = settings.ASYNC_DATABASE_URL
    batch_size = settings.EXERCISE_BATCH_SIZE
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from grammar_drills.enums import RateLimitType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Grammar Drills"
    DEBUG: bool = False

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "grammardrills"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "grammardrills"

    # Full database URL, overrides the POSTGRES_* settings when set.
    # Examples: sqlite:///./drills.db, postgresql://user:pw@host/db
    DATABASE_URL: str = ""

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def POSTGRES_URL_SYNC(self) -> str:
        """Sync PostgreSQL connection URL for Alembic migrations."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Async database URL used by the engine."""
        if self.DATABASE_URL:
            return normalize_async_url(self.DATABASE_URL)
        return self.POSTGRES_URL

    # LLM providers
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    # OpenAI-compatible endpoint (self-hosted gateways, proxies)
    OPENAI_API_BASE: str = ""

    # Text model in LiteLLM format: provider/model-name
    TEXT_MODEL: str = "openai/gpt-3.5-turbo-1106"

    # Per-operation overrides, empty means TEXT_MODEL
    EXERCISE_GENERATION_MODEL: str = ""
    PROMPT_REFINEMENT_MODEL: str = ""
    EXERCISE_GENERATION_TEMPERATURE: float = 0.8

    # Exercise delivery
    EXERCISE_BATCH_SIZE: int = 10
    PROMPT_VERSION_RETENTION: int = 10
    PROMPT_REFINEMENT_ENABLED: bool = True
    GENERATION_TIMEOUT_SECONDS: float = 60.0
    REFINEMENT_TIMEOUT_SECONDS: float = 30.0

    # Identity and authorization
    USER_COOKIE_NAME: str = "user_id"
    ADMIN_USER_IDS: list[str] = []

    # Startup
    SEED_DEFAULT_TOPICS: bool = True

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_LLM_HEAVY: str = "20/minute"
    RATE_LIMIT_AUTH: str = "30/minute"
    RATE_LIMIT_ADMIN: str = "30/minute"

    def get_rate_limit(self, rate_limit_type: RateLimitType) -> str:
        """
        Get the rate limit string for an endpoint category.

        Args:
            rate_limit_type: RateLimitType enum value

        Returns:
            Rate limit string in slowapi format (e.g., "20/minute")
        """
        limits = {
            RateLimitType.DEFAULT: self.RATE_LIMIT_DEFAULT,
            RateLimitType.LLM_HEAVY: self.RATE_LIMIT_LLM_HEAVY,
            RateLimitType.AUTH: self.RATE_LIMIT_AUTH,
            RateLimitType.ADMIN: self.RATE_LIMIT_ADMIN,
        }
        return limits.get(rate_limit_type, self.RATE_LIMIT_DEFAULT)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def normalize_async_url(url: str) -> str:
    """
    Rewrite a database URL so it uses an async driver.

    Args:
        url: Database URL as configured (sync or async driver)

    Returns:
        URL using aiosqlite for SQLite and asyncpg for PostgreSQL
    """
    if url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + url[len("sqlite://"):]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://"):]
    return url


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
