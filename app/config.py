# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.AWS_S3_BUCKET)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Storage and database credentials are required: a missing value fails the
# process at import time, never at the first upload.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Auth + metadata database. Required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify Supabase Auth tokens"
    )

    # -------------------------------------------------------------------------
    # Object Storage (S3 or S3-compatible)
    # -------------------------------------------------------------------------

    AWS_ACCESS_KEY_ID: str = Field(
        ...,
        description="Access key id used to mint signed URLs"
    )

    AWS_SECRET_ACCESS_KEY: str = Field(
        ...,
        description="Secret access key used to mint signed URLs"
    )

    AWS_REGION: str = Field(
        ...,
        description="Bucket region (e.g., us-east-1)"
    )

    AWS_S3_BUCKET: str = Field(
        ...,
        description="Bucket holding every idea file and image"
    )

    S3_ENDPOINT_URL: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible services (MinIO, R2, ...)"
    )

    UPLOAD_URL_EXPIRY: int = Field(
        default=3600,
        ge=1,
        le=604800,
        description="Lifetime of signed upload URLs in seconds"
    )

    DOWNLOAD_URL_EXPIRY: int = Field(
        default=300,
        ge=1,
        le=604800,
        description="Lifetime of signed download URLs in seconds"
    )

    MAX_FILE_SIZE: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Maximum accepted upload size in bytes"
    )

    FALLBACK_IMAGE_PATH: str = Field(
        default="/images/image-placeholder.jpg",
        description="Placeholder asset shown when an object cannot be retrieved"
    )

    RETRIEVAL_VERIFY_LOAD: bool = Field(
        default=False,
        description="Probe each signed download URL before handing it out"
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for PUT/probe requests against signed URLs"
    )

    # -------------------------------------------------------------------------
    # OpenAI / LLM Configuration
    # -------------------------------------------------------------------------
    # Required for the idea validation agent

    OPENAI_API_KEY: str = Field(
        ...,
        description="OpenAI API key for idea validation"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4-turbo",
        description="Model used for idea validation (must support JSON mode)"
    )

    VALIDATION_TEMPERATURE: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="OpenAI temperature for idea validation (lower = more consistent)"
    )

    VALIDATION_MAX_TOKENS: int = Field(
        default=2000,
        ge=100,
        le=16000,
        description="Completion token budget for one validation report"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty values count as missing, so a blank AWS_S3_BUCKET= still fails
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://fundyouridea.com" -> [...]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
