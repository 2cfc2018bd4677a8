"""
WhatsCommerce Configuration

All environment variables and settings for the dashboard API.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # APP
    # ==========================================================================
    app_name: str = "WhatsCommerce"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # SUPABASE
    # ==========================================================================
    supabase_url: str
    supabase_service_key: str

    # ==========================================================================
    # ADMIN DASHBOARD
    # ==========================================================================
    admin_cors_origins: str = "http://localhost:5173"
    admin_rate_limit_rpm: int = 60

    # ==========================================================================
    # DASHBOARD METRICS
    # ==========================================================================
    currency_symbol: str = "€"
    ai_response_rate_fallback: float = 94.2  # shown when there are no conversations
    activity_feed_limit: int = 4
    low_stock_threshold: int = 10

    # Products table historically had no user_id; scoping is opt-out
    scope_products_by_owner: bool = True

    # ==========================================================================
    # SERVER
    # ==========================================================================
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
