"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./fintrack.db"

    # App settings
    app_name: str = "Personal Finance Tracker"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # JWT Configuration
    jwt_secret_key: str = "CHANGE-ME-IN-PRODUCTION-USE-LONG-RANDOM-STRING"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 7
    jwt_refresh_token_expire_days: int = 30

    # Price feeds
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    alpha_vantage_api_key: str = ""
    price_fetch_timeout_seconds: float = 10.0
    price_cache_ttl_seconds: int = 0  # 0 disables caching

    # AI assistant (OpenAI-compatible proxy)
    ai_proxy_url: Optional[str] = None
    ai_api_key: str = ""
    ai_model: str = "gpt-3.5-turbo"
    ai_timeout_seconds: float = 30.0

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
