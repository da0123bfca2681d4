"""Configuration management for InferDev application.

This module handles all configuration loading, validation, and management
using Pydantic Settings for type safety and environment variable support.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inferdev.utils.logger import setup_logging


class Settings(BaseSettings):
    """Application settings with validation and type hints."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Settings
    APP_NAME: str = Field(default="InferDev", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_ENV: str = Field(
        default="development",
        description="Application environment",
        pattern="^(development|test|staging|production)$",
    )
    APP_DEBUG: bool = Field(default=True, description="Debug mode")
    APP_HOST: str = Field(default="0.0.0.0", description="Application host")
    APP_PORT: int = Field(default=8000, description="Application port", ge=1, le=65535)

    # API Settings
    API_V1_PREFIX: str = Field(default="/api/v1", description="API v1 prefix")
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )

    # Recommendation backend
    RECOMMENDER_API_URL: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the external recommendation backend",
    )
    RECOMMENDER_API_TOKEN: Optional[str] = Field(
        default=None, description="Bearer token forwarded to the backend"
    )
    RECOMMENDER_TIMEOUT: float = Field(
        default=30.0, description="Backend request timeout in seconds", gt=0
    )

    # Survey Settings
    SURVEY_MODE: str = Field(
        default="two_stage",
        description="Default scoring mode for new sessions",
        pattern="^(local|single|two_stage)$",
    )
    SURVEY_USER_ID: str = Field(
        default="anonymous", description="User ID sent with scoring requests"
    )
    CATALOG_PATH: Optional[str] = Field(
        default=None,
        description="JSON catalog used in local mode (bundled sample when unset)",
    )
    CATALOG_CACHE_TTL_SECONDS: int = Field(
        default=300, description="Reference data cache TTL in seconds", ge=0
    )
    SESSION_TTL_MINUTES: int = Field(
        default=60, description="Idle survey session lifetime in minutes", ge=1
    )
    MAX_SESSIONS: int = Field(
        default=10000, description="Maximum number of live survey sessions", ge=1
    )

    # Feature Flags
    ENABLE_API_DOCS: bool = Field(default=True, description="Enable API documentation")
    ENABLE_METRICS: bool = Field(default=True, description="Enable metrics collection")

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    LOG_FORMAT: str = Field(
        default="text", description="Log format", pattern="^(json|text)$"
    )
    LOG_FILE_PATH: Optional[str] = Field(default=None, description="Log file path")
    LOG_FILE_MAX_SIZE: int = Field(
        default=10485760, description="Log file max size in bytes", ge=1024
    )
    LOG_FILE_BACKUP_COUNT: int = Field(
        default=5, description="Log file backup count", ge=0
    )

    @field_validator("RECOMMENDER_API_URL")
    def validate_recommender_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("RECOMMENDER_API_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("API_V1_PREFIX")
    def validate_api_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            v = f"/{v}"
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings after all fields are set."""
        if self.APP_ENV == "test":
            self.ENABLE_METRICS = False

        if self.APP_ENV == "production":
            self.APP_DEBUG = False
            self.LOG_LEVEL = "INFO" if self.LOG_LEVEL == "DEBUG" else self.LOG_LEVEL

        return self

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings instance
    """
    settings = Settings()

    setup_logging(
        environment=settings.APP_ENV,
        log_level=settings.LOG_LEVEL,
        format_type=settings.LOG_FORMAT,
        log_file=settings.LOG_FILE_PATH,
        max_bytes=settings.LOG_FILE_MAX_SIZE,
        backup_count=settings.LOG_FILE_BACKUP_COUNT,
    )

    return settings
