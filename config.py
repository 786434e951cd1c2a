"""
Centralized configuration using Pydantic BaseSettings.
All environment variables are optional to prevent application startup failure.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,  # Allow both field name and alias
        extra="ignore",
    )

    # Admin identity (single configured account)
    admin_username: Optional[str] = Field(default=None, alias="ADMIN_USERNAME")
    admin_password: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD")
    admin_password_hash: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD_HASH")

    # Session configuration
    session_secret: Optional[str] = Field(default=None, alias="SESSION_SECRET")
    session_ttl_hours: int = Field(default=24, alias="SESSION_TTL_HOURS")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")
    session_purge_interval_minutes: int = Field(default=60, alias="SESSION_PURGE_INTERVAL_MINUTES")

    # Infrastructure configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./portfolio.db", alias="DATABASE_URL")

    # Frontend configuration
    frontend_url: Optional[str] = Field(default="http://localhost:5173", alias="FRONTEND_URL")

    # Logging
    log_dir: str = Field(default="./logs", alias="LOG_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Environment configuration
    env: Optional[str] = Field(default=None, alias="ENV")


# Instantiate settings object
settings = Settings()

# Determine if we're in production mode
IS_PRODUCTION = bool(settings.env and settings.env.lower() == "production")
