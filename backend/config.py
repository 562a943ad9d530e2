"""
Configuration management for the storefront backend.

Loads settings from .env via pydantic-settings.

Notes:
    - PayFast credentials default to the public sandbox merchant so a fresh
      checkout works against sandbox.payfast.co.za out of the box.
    - validate_production_settings() refuses sandbox credentials in production.
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

from domain.constants import PAYFAST_LIVE_URL, PAYFAST_SANDBOX_URL

logger = logging.getLogger(__name__)

SANDBOX_MERCHANT_ID = "10000100"
SANDBOX_MERCHANT_KEY = "46f0cd694581a"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/storefront.db"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    store_name: str = "Nuke Brand"

    # ── PayFast ─────────────────────────────────────────────────────
    payfast_merchant_id: str = SANDBOX_MERCHANT_ID
    payfast_merchant_key: str = SANDBOX_MERCHANT_KEY
    payfast_passphrase: str = ""
    payfast_return_url: str = "http://localhost:3000/payment/success"
    payfast_cancel_url: str = "http://localhost:3000/payment/cancel"
    payfast_notify_url: str = "http://localhost:5000/api/payments/notify"
    payfast_sandbox: bool = True
    payfast_item_name_prefix: str = "Nuke Order"

    # ── Mail (SMTP) ─────────────────────────────────────────────────
    smtp_host: str = "smtp.zoho.com"
    smtp_port: int = 587
    smtp_use_tls: bool = True
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_timeout_seconds: int = 10
    mail_from: str = "hello@nukebrand.com"
    store_inbox_email: str = "hello@nukebrand.com"

    # ── Contact form ────────────────────────────────────────────────
    contact_rate_limit: int = 5
    contact_rate_window_seconds: int = 300

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def payfast_process_url(self) -> str:
        """Where the browser form is posted: sandbox or live PayFast."""
        return PAYFAST_SANDBOX_URL if self.payfast_sandbox else PAYFAST_LIVE_URL

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Production must talk to live PayFast with
        real merchant credentials and a passphrase; elsewhere we only warn.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if self.payfast_sandbox:
                raise ValueError(
                    "PAYFAST_SANDBOX must be false in production. "
                    "Sandbox payments are never settled."
                )
            if self.payfast_merchant_id == SANDBOX_MERCHANT_ID or \
                    self.payfast_merchant_key == SANDBOX_MERCHANT_KEY:
                raise ValueError(
                    "PAYFAST_MERCHANT_ID / PAYFAST_MERCHANT_KEY still hold the "
                    "public sandbox credentials."
                )
            if not self.payfast_passphrase:
                raise ValueError(
                    "PAYFAST_PASSPHRASE must be set in production. "
                    "It is part of every payment signature."
                )
            logger.info("✅ Production settings validated")
        else:
            warnings = []
            if self.payfast_sandbox:
                warnings.append("PAYFAST_SANDBOX=true (payments go to sandbox.payfast.co.za)")
            if not self.payfast_passphrase:
                warnings.append("PAYFAST_PASSPHRASE is empty (signatures use '&passphrase=')")
            if not self.smtp_user:
                warnings.append("SMTP_USER is empty (emails will fail to send)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(f"⚠️  {w}")


# Global settings instance
settings = Settings()
