"""
Configuration settings for the SmartPark car wash system.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Application
    app_name: str = "SmartPark Car Wash Sales Management"
    app_version: str = "2.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Database
    database_url: str = "sqlite+aiosqlite:///./smartpark.db"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # API
    api_prefix: str = "/api"

    # Billing
    company_location: str = "Rubavu District, Western Province, Rwanda"
    strict_status_transitions: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
