"""
Centralized application configuration
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from the environment and .env"""

    # API Settings
    API_TITLE: str = "Gleaming Admin API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Admin backend for the Gleaming jewelry storefront"
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (Supabase Postgres)
    DATABASE_URL: str = ""
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""
    SUPABASE_JWT_AUDIENCE: str = "authenticated"

    # Optimistic transactions (read-then-write, retried on conflict)
    TRANSACTION_MAX_ATTEMPTS: int = 5
    TRANSACTION_RETRY_DELAY: float = 0.05

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:9002"

    # Storefront
    STORE_NAME: str = "Gleaming Admin"
    STORE_TIMEZONE: str = "Asia/Kolkata"
    CURRENCY_SYMBOL: str = "₹"
    # The PDF base fonts have no rupee glyph
    INVOICE_CURRENCY_PREFIX: str = "Rs. "
    LOW_STOCK_THRESHOLD: int = 10
    METAL_GST_RATE: float = 3.0
    PLACEHOLDER_IMAGE_URL: str = "https://picsum.photos/seed/placeholder/64/64"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
