"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, SMTP, Razorpay secrets, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings
from typing import Optional, Literal, List
import logging

logger = logging.getLogger(__name__)


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3001",
    "http://127.0.0.1:5500",
    "https://coscoships-login.netlify.app",
    "https://cosco-ships.netlify.app",
    "https://cosco-backend.onrender.com",
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="cosco",
        description="MongoDB database name"
    )

    # Mail (SMTP)
    SMTP_HOST: str = Field(
        default="smtp.gmail.com",
        description="SMTP server host"
    )
    SMTP_PORT: int = Field(
        default=587,
        description="SMTP server port"
    )
    SMTP_USER: Optional[str] = Field(
        default=None,
        description="SMTP login, also used as the sender address"
    )
    SMTP_PASSWORD: Optional[str] = Field(
        default=None,
        description="SMTP password (Gmail app password)"
    )
    SMTP_USE_TLS: bool = Field(
        default=True,
        description="Issue STARTTLS after connecting"
    )
    SMTP_TIMEOUT: float = Field(
        default=10.0,
        description="SMTP socket timeout in seconds"
    )
    MAIL_FROM_NAME: str = Field(
        default="COSCO Shipping",
        description="Display name on outgoing OTP emails"
    )

    # Razorpay
    RAZORPAY_KEY_ID: Optional[str] = Field(
        default=None,
        description="Razorpay API key id"
    )
    RAZORPAY_KEY_SECRET: Optional[str] = Field(
        default=None,
        description="Razorpay API key secret, also the payment signature secret"
    )
    RAZORPAY_BASE_URL: str = Field(
        default="https://api.razorpay.com",
        description="Razorpay API base URL"
    )
    RAZORPAY_TIMEOUT: float = Field(
        default=15.0,
        description="Razorpay request timeout in seconds"
    )
    PAYMENT_CURRENCY: str = Field(
        default="INR",
        description="Currency for every order created through the gateway"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    PORT: int = Field(
        default=5000,
        description="Port the HTTP server listens on"
    )
    CORS_ORIGINS: List[str] = Field(
        default=DEFAULT_CORS_ORIGINS,
        description="Allowed CORS origins"
    )

    @field_validator("RAZORPAY_KEY_SECRET")
    @classmethod
    def validate_razorpay_secret(cls, v, info: ValidationInfo):
        """Ensure the payment secret is set in production."""
        if info.data.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("RAZORPAY_KEY_SECRET is required in production environment")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def mail_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASSWORD)

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    Missing mail or gateway credentials only warn, so the rest of the API stays usable.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.mail_configured:
        logger.warning("SMTP_USER / SMTP_PASSWORD not set - OTP emails will fail without these")

    if not settings.RAZORPAY_KEY_SECRET:
        logger.warning("RAZORPAY_KEY_SECRET not set - payment verification will fail without it")

    if not settings.RAZORPAY_KEY_ID:
        logger.warning("RAZORPAY_KEY_ID not set - order creation will fail without it")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
