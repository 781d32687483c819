"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "FX Helper"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # SQLite (journal persistence)
    sqlite_path: Optional[str] = None  # Defaults to ./data/fxhelper.db

    # CORS
    allowed_origins: list[str] = ["*"]

    # Optional shared secret checked against the X-API-Key header
    helper_api_key: Optional[str] = None

    # OANDA v3 REST API
    oanda_env: str = "live"  # Options: live, practice
    oanda_token: Optional[str] = None
    oanda_account_id: Optional[str] = None
    oanda_live_url: str = "https://api-fxtrade.oanda.com"
    oanda_practice_url: str = "https://api-fxpractice.oanda.com"
    broker_timeout_seconds: float = 15.0

    # Indicator engine
    min_candles_floor: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
