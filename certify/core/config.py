"""
Application Configuration

Uses Pydantic Settings for environment variable management with validation.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Admin (static shared secret, see README of the admin portal)
    ADMIN_PASSWORD: str = ""
    ADMIN_TOKEN: str = "admin-token-123"

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "certificates"
    PLACEHOLDER_IMAGE_URL: str = "https://placehold.co/600x400"

    # SMTP (explicit transport)
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_SECURE: bool = False
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""

    # Legacy Gmail shorthand
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    EMAIL_FROM_NAME: str = "High Furries"
    EMAIL_FROM_ADDRESS: str = ""

    # CORS
    DEFAULT_ORIGINS: str = (
        "https://welcome-chi-three.vercel.app,"
        "https://www.highfurries.com,"
        "http://localhost:3000,"
        "http://localhost:5173,"
        "https://mk-pankaj.github.io"
    )
    ALLOWED_ORIGINS: str = ""

    # Persistence
    STORAGE_BACKEND: str = "file"
    PERSISTENT_STORAGE_PATH: str = "."
    DATABASE_URL: str = "sqlite+aiosqlite:///./certificates.sqlite3"

    # Rendering
    TEMPLATE_PATH: str = "assets/template.jpg"
    FONT_PATH: str = "assets/fonts/OpenSans-Regular.ttf"
    LAYOUT_PATH: str = ""

    # Identifiers and links
    CERT_ID_PREFIX: str = "HF"
    VERIFY_BASE_URL: str = "https://www.highfurries.com/verify"

    # Public resend endpoint rate limit
    RESEND_RATE_PER_MINUTE: int = 5
    RESEND_BURST: int = 2
    # Behind a trusted reverse proxy, key clients by X-Forwarded-For
    RESEND_TRUST_FORWARDED_FOR: bool = False
    RESEND_MAX_CLIENTS: int = 10000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Build the CORS allow-list.

        Built-in origins first, then the comma-separated ALLOWED_ORIGINS
        extras with trailing slashes stripped. The literal "null" origin
        (pages opened from the local filesystem) is always allowed.
        """
        origins: List[str] = []
        for raw in (self.DEFAULT_ORIGINS, self.ALLOWED_ORIGINS):
            for origin in raw.split(","):
                origin = origin.strip().rstrip("/")
                if origin and origin not in origins:
                    origins.append(origin)
        if "null" not in origins:
            origins.append("null")
        return origins

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def storage_configured(self) -> bool:
        """Remote storage is used only when a cloud name is set."""
        return bool(self.CLOUDINARY_CLOUD_NAME)

    @property
    def mail_user(self) -> str:
        return self.SMTP_USER or self.EMAIL_USER

    @property
    def mail_password(self) -> str:
        return self.SMTP_PASSWORD or self.EMAIL_PASS

    @property
    def mail_host(self) -> str:
        """Explicit SMTP host, or Gmail when only the legacy shorthand is set."""
        return self.SMTP_HOST or "smtp.gmail.com"

    @property
    def mail_configured(self) -> bool:
        return bool(self.mail_user and self.mail_password)

    @property
    def mail_from_address(self) -> str:
        return self.EMAIL_FROM_ADDRESS or self.mail_user

    def verification_url(self, cert_id: str) -> str:
        """Public verification link for a certificate."""
        return f"{self.VERIFY_BASE_URL}?id={cert_id}"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are only loaded once.
    """
    return Settings()
