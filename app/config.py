# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
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
    # Auth, the users/campaigns/payments tables and media storage all live
    # in one Supabase project.

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for sign-in/sign-up)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
    )

    STORAGE_BUCKET: str = Field(
        default="campaign-assets",
        description="Storage bucket for source files and generated media"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # OpenAI / Generation Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        ...,
        description="OpenAI API key for content and image generation"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat model for the marketing package (must support JSON mode)"
    )

    OPENAI_IMAGE_MODEL: str = Field(
        default="dall-e-3",
        description="Image model for the campaign artwork"
    )

    GENERATION_TEMPERATURE: float = Field(
        default=0.8,
        ge=0.0,
        le=2.0,
        description="Temperature for caption/email copy (higher = more varied)"
    )

    USE_MOCK_GENERATION: bool = Field(
        default=False,
        description="Return canned content and a placeholder image instead of calling OpenAI"
    )

    # -------------------------------------------------------------------------
    # Video Assembly
    # -------------------------------------------------------------------------

    VIDEO_WIDTH: int = Field(default=1080, ge=16, description="Video width in pixels")
    VIDEO_HEIGHT: int = Field(default=1920, ge=16, description="Video height in pixels")
    VIDEO_DURATION_SECONDS: int = Field(default=15, ge=1, le=60, description="Video length")
    VIDEO_FPS: int = Field(default=30, ge=1, le=60, description="Video frame rate")

    # -------------------------------------------------------------------------
    # Stripe Configuration
    # -------------------------------------------------------------------------
    # Payments are disabled (checkout returns a configuration error) until
    # STRIPE_SECRET_KEY is set.

    STRIPE_SECRET_KEY: str = Field(
        default="",
        description="Stripe secret API key"
    )

    STRIPE_WEBHOOK_SECRET: str = Field(
        default="",
        description="Signing secret for the Stripe webhook endpoint"
    )

    STRIPE_PRICE_PER_CAMPAIGN: str = Field(
        default="",
        description="Stripe price ID for the one-time per-campaign plan"
    )

    STRIPE_PRICE_PRO_SUBSCRIPTION: str = Field(
        default="",
        description="Stripe price ID for the monthly Pro subscription"
    )

    CHECKOUT_SUCCESS_URL: str = Field(
        default="http://localhost:3000/checkout/success?session_id={CHECKOUT_SESSION_ID}",
        description="Where Stripe sends the user after a successful checkout"
    )

    CHECKOUT_CANCEL_URL: str = Field(
        default="http://localhost:3000/checkout/cancel",
        description="Where Stripe sends the user after a cancelled checkout"
    )

    BILLING_PORTAL_RETURN_URL: str = Field(
        default="http://localhost:3000/settings",
        description="Return URL for the Stripe customer portal"
    )

    PASSWORD_RESET_REDIRECT_URL: str = Field(
        default="http://localhost:3000/reset-password",
        description="Link target in password reset emails"
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

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=200,
        ge=1,
        le=2000,
        description="Maximum source file size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (production sets env vars directly)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def stripe_enabled(self) -> bool:
        """Check if Stripe checkout can be used."""
        return bool(self.STRIPE_SECRET_KEY)

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
