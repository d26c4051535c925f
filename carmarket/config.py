"""
Configuration settings for the Car Marketplace API.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Car Marketplace"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./carmarket.db"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    cookie_name: str = "token"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # API
    api_prefix: str = "/api"

    # AI model
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"

    # Seeded administrator, created on startup when both are set
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    admin_name: str = "Administrator"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @property
    def cookie_secure(self) -> bool:
        return self.environment != "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
