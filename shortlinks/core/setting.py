"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Defaults to a file-based SQLite database under ./data
- BASE_URL is the public prefix used to build short links
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Server
    HOST: str = Field(default="0.0.0.0", description="Listen address")
    PORT: int = Field(default=8080, description="Listen port")

    # Database Configuration
    # For SQLite: sqlite+aiosqlite:///./data/urlshortener.db (default)
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/urlshortener.db",
        description="Database connection string"
    )
    CREATE_TABLES_ON_STARTUP: bool = Field(
        default=True,
        description="Create missing tables at startup (disable when using Alembic)"
    )

    # Application Configuration
    BASE_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL for generating short links"
    )
    DEFAULT_VALIDITY_MINUTES: int = Field(
        default=30,
        gt=0,
        description="Validity window applied when the caller does not supply one"
    )

    # Short Code Configuration
    SHORT_CODE_LENGTH: int = Field(
        default=7,
        ge=4,
        le=32,
        description="Length of generated short codes"
    )
    SHORT_CODE_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        description="Insert attempts for generated codes before giving up on collisions"
    )

    # Request handling
    MAX_BODY_BYTES: int = Field(
        default=64 * 1024,
        gt=0,
        description="Largest accepted request body; bigger bodies get 413"
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level for the shortlinks logger")
    LOG_FILE: Optional[str] = Field(
        default="./data/logs.txt",
        description="Request log file; empty disables file logging"
    )


settings = Settings()
