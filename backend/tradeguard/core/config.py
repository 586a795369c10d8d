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
    app_name: str = "TradeGuard Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # SQLite (analysis history)
    sqlite_path: Optional[str] = None  # Defaults to ./data/tradeguard.db

    # CORS (Frontend URL)
    frontend_url: str = "http://localhost:3000"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Market data
    market_data_provider: str = "yahoo"  # Options: yahoo, mock
    default_timeframe: str = "15m"
    history_lookback: int = 300  # MA200 needs at least 200 closes

    # Position sizing
    fee_rate: float = 0.0007  # maker 0.02% + taker 0.05%
    margin_warning_percent: float = 30.0
    max_margin_usage_percent: float = 100.0

    # LLM Providers
    llm_enabled: bool = True
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    llm_primary_provider: str = "gemini"  # Options: gemini, anthropic, openai
    llm_model: Optional[str] = None  # Provider default when unset
    llm_temperature: float = 0.2
    llm_max_tokens: int = 2048

    # History
    history_default_limit: int = 20

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
