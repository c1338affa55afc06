"""
Application configuration using Pydantic settings.

This module contains all configuration settings for the application,
loaded from environment variables with sensible defaults.
"""

from typing import List, Optional, Union

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden with environment variables.
    """

    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Vibelytics API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # JWT Configuration
    # Tokens cannot be issued or verified until this is set.
    JWT_SECRET: Optional[str] = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[str, List[str]] = (
        "http://localhost:5173,http://localhost:3000,"
        "https://personal-mood-tracker-800c5.web.app,"
        "https://personal-mood-tracker-800c5.firebaseapp.com"
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(
        cls, v: Union[str, List[str]]
    ) -> List[str]:
        """
        Parse CORS origins from environment variable.

        Supports:
        - Comma-separated string: "http://localhost,http://example.com"
        - Already parsed list: ["http://localhost"]
        - Empty string: returns empty list
        """
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS origins format: {v}")

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./vibelytics.db"
    CREATE_TABLES_ON_STARTUP: bool = True

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        """Normalize Render/Railway/Heroku style URLs to async drivers."""
        if not v:
            return "sqlite+aiosqlite:///./vibelytics.db"
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v

    # National Weather Service
    NWS_BASE_URL: str = "https://api.weather.gov"
    NWS_USER_AGENT: str = "Vibelytics (vibelytics.app, contact@vibelytics.app)"
    DEFAULT_LATITUDE: float = 40.7128
    DEFAULT_LONGITUDE: float = -74.0060
    WEATHER_CACHE_MINUTES: int = 60
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Google sign-in
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CERTS_URL: str = "https://www.googleapis.com/oauth2/v3/certs"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Create global settings instance
settings = Settings()
