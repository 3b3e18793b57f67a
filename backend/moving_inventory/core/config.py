"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly. Components that need configuration
(admin key check, CRM webhook, image upload) receive the Settings instance
through FastAPI dependencies or their constructor.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Database - defaults to a local SQLite file, override via env for PostgreSQL
    database_url: str = "sqlite:///./data/moving_inventory.db"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:3000"

    # Rate limiting
    rate_limit_enabled: bool = True

    # ==========================================================================
    # Admin access (x-admin-key header)
    # ==========================================================================
    admin_api_key: Optional[str] = None

    # ==========================================================================
    # CRM webhook (GoHighLevel)
    # ==========================================================================
    crm_webhook_url: Optional[str] = None
    crm_api_key: str = ""
    crm_timeout_seconds: float = 10.0

    # Public web app, used to build customer-facing inventory links
    web_url: str = "http://localhost:3000"

    # ==========================================================================
    # Image hosting (Cloudinary)
    # ==========================================================================
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_upload_preset: str = "moving_inventory"

    # Inventory rules
    inventory_expiry_days: int = 30
    token_length: int = 24
    max_item_photos: int = 5
    audit_default_limit: int = 20

    @field_validator("token_length")
    @classmethod
    def validate_token_length(cls, v: int) -> int:
        if v < 16:
            raise ValueError("TOKEN_LENGTH must be at least 16 characters")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
