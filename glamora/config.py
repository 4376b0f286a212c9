from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # MongoDB Configuration
    # ==========================================================================
    mongodb_uri: str
    mongodb_database: str = "glamora"

    # ==========================================================================
    # Redis Configuration (optional user cache)
    # ==========================================================================
    redis_url: Optional[str] = None

    # ==========================================================================
    # JWT Configuration (REQUIRED - no default)
    # ==========================================================================
    jwt_secret: str  # No default - must be configured
    jwt_algorithm: str = "HS256"
    jwt_expiry_hours: int = 24

    # ==========================================================================
    # Admin Dashboard Credentials
    # ==========================================================================
    admin_username: str = "admin"
    admin_password: str  # No default - must be configured
    admin_email: str = "admin@glamora.com"
    admin_name: str = "Admin"

    # ==========================================================================
    # Rate Limiting
    # ==========================================================================
    rate_limit_per_minute: int = 120
    rate_limit_login_per_minute: int = 10
    # Honour X-Forwarded-For only behind a trusted reverse proxy
    trust_forwarded_for: bool = False

    # ==========================================================================
    # Moderation
    # ==========================================================================
    restriction_sweep_minutes: int = 10

    # ==========================================================================
    # Pagination
    # ==========================================================================
    default_page_size: int = 10
    max_page_size: int = 100

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    api_prefix: str = "/api"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "*"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {v}")
        return level

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into list."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading env vars on every request.
    """
    return Settings()


# Convenience export
settings = get_settings()
