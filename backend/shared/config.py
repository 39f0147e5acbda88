"""
Centralized configuration for the Interceptor backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., STRIPE_*, SUPABASE_*).

Security-sensitive values (signing secrets, API keys, the Stripe price) have
no usable default: an empty value means "not configured", and the code that
needs it raises ConfigurationError instead of falling back to anything.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


# Settings that must be provided for the service to work end to end
REQUIRED_SECRETS = (
    "jwt_secret",
    "supabase_url",
    "supabase_service_role_key",
    "resend_api_key",
    "stripe_secret_key",
    "stripe_webhook_secret",
    "stripe_price_id",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Interceptor API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""  # Direct Postgres URL, used by run_migrations.py

    # Session tokens
    jwt_secret: str = ""
    session_ttl_days: int = 30
    magic_link_ttl_minutes: int = 15

    # Email (Resend)
    resend_api_key: str = ""
    email_from: str = "Privacy Interceptor <noreply@updates.rhivo.app>"
    email_timeout_seconds: float = 10.0

    # Frontend URLs (for magic links and checkout redirects)
    frontend_url: str = "http://localhost:5173"
    magic_link_path: str = "/privacyInterceptor/auth/verify"
    checkout_success_path: str = "/privacyInterceptor/checkout/success"
    checkout_cancel_path: str = "/privacyInterceptor"

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_price_id: str = ""

    # Feature Flags
    enable_legacy_check_status: bool = True

    def missing_secrets(self) -> list[str]:
        """Return the names of required settings that are empty."""
        return [
            name.upper()
            for name in REQUIRED_SECRETS
            if not str(getattr(self, name)).strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
