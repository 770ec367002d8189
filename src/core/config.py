"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    Optional provider credentials default to empty strings; an empty value
    means the provider is not configured for this environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="storefront-backend", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    max_request_body_size: int = Field(default=1_048_576, description="Maximum request body size in bytes")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")
    store_timeout_seconds: float = Field(default=10.0, description="Timeout for a single order store call")

    # Printful
    printful_access_token: str = Field(default="", description="Printful private access token")
    printful_store_id: str = Field(default="", description="Printful store ID (X-PF-Store-Id header)")
    printful_api_url: str = Field(default="https://api.printful.com", description="Printful API base URL")
    printful_timeout_seconds: float = Field(default=15.0, description="Timeout for Printful API calls")

    # Email (Resend)
    resend_api_key: str = Field(default="", description="Resend API key for sending emails")
    email_from_address: str = Field(
        default="Shadow The Great <noreply@resend.dev>",
        description="From address for transactional emails",
    )
    order_notification_email: str = Field(
        default="orders@example.com",
        description="Store owner address that receives new order notifications",
    )
    email_timeout_seconds: float = Field(default=10.0, description="Timeout for a single email send")

    # Storefront
    store_name: str = Field(default="Shadow The Great", description="Store name used in customer emails")
    order_number_prefix: str = Field(default="STG", description="Prefix for generated order numbers")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_printful_configured(self) -> bool:
        """Check if both Printful credentials are present."""
        return bool(self.printful_access_token and self.printful_store_id)

    @property
    def is_email_configured(self) -> bool:
        """Check if the Resend API key is present."""
        return bool(self.resend_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache, so they are read once at
        process start. Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
