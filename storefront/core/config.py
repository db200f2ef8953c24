"""
Centralized application configuration
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env"""

    # API Settings
    API_TITLE: str = "Storefront API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Storefront with seller, admin and superadmin dashboards"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (Supabase Postgres) and Supabase project
    DATABASE_URL: str
    DB_CONNECT_TIMEOUT: int = 10
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    STORAGE_BUCKET: str = "Core"

    # CORS - Can be string (comma-separated) or JSON array
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:8000"

    # Session cookies
    SESSION_COOKIE: str = "user-session"
    REFRESH_COOKIE: str = "user-session-id"
    COOKIE_SECURE: bool = False
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 7

    # Storefront rules
    PHONE_PREFIX: str = "+6"
    SIGNUP_EMAIL_DOMAIN: str = "web.com"
    CASHBACK_RATE: float = 0.03
    TRIAL_BONUS: float = 300
    TASK_SLOTS: int = 36
    CURRENCY_SYMBOL: str = "৳"

    # Product cache TTLs in seconds
    PRODUCT_CACHE_TTL: int = 600
    IMAGE_CACHE_TTL: int = 1800

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
