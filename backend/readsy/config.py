"""
Configuration settings for the Readsy API and client.

Loads environment variables from .env file and provides typed configuration.
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    ENVIRONMENT: str = Field(
        default="development", description="development, production or test"
    )
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Security Configuration
    JWT_ACCESS_SECRET: str = Field(
        default="readsy-dev-access-secret-change-me",
        description="Secret used to sign access tokens",
    )
    JWT_REFRESH_SECRET: str = Field(
        default="readsy-dev-refresh-secret-change-me",
        description="Secret used to sign refresh tokens",
    )
    JWT_ACCESS_EXPIRE_MINUTES: int = Field(
        default=15, description="Access token lifetime in minutes"
    )
    JWT_REFRESH_EXPIRE_DAYS: int = Field(
        default=7, description="Refresh token lifetime in days"
    )
    BCRYPT_ROUNDS: int = Field(default=12, description="bcrypt cost factor")

    # Social login (provider integration is handled outside this service)
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""

    # Database Configuration
    DATABASE_URL: str = Field(
        default="sqlite:///./data/readsy.db", description="SQLAlchemy database URL"
    )
    DATABASE_ECHO: bool = Field(
        default=False, description="Echo SQL queries (for debugging)"
    )

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable slowapi limits")
    AUTH_RATE_LIMIT: str = Field(
        default="5/minute", description="Limit applied to login and refresh"
    )

    # Gamification
    GAMIFICATION_MAX_LEVEL: int = Field(default=10, ge=2)
    GAMIFICATION_MAX_XP: int = Field(default=5500, ge=1)
    GAMIFICATION_LEVEL_CURVE: str = Field(
        default="fibonacci", description="Level curve: 'fibonacci' or 'linear'"
    )
    GAMIFICATION_BASE_XP_PER_CHECKIN: int = Field(default=10, ge=0)
    GAMIFICATION_XP_PER_PAGE: int = Field(default=1, ge=0)
    GAMIFICATION_XP_PER_MINUTE: int = Field(default=2, ge=0)

    # Client Configuration
    NEXT_PUBLIC_API_URL: str = Field(
        default="http://localhost:8000", description="Base URL used by the API client"
    )
    CLIENT_TIMEOUT: float = Field(
        default=15.0, description="Client request timeout in seconds"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    ENABLE_FILE_LOGGING: bool = Field(
        default=False, description="Enable logging to file"
    )
    LOG_DIR: str = Field(default="./logs", description="Directory for log files")


# Global settings instance
settings = Settings()
