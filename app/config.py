"""
DP Travels Backend Configuration
Environment variables and application settings
"""

from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:3000,https://www.dptravels.in,https://dptravels.onrender.com"

    # Rate limiting (fixed window, per client IP)
    rate_limit: str = "100 per 15 minutes"
    rate_limit_enabled: bool = True

    # Booking dates are compared against "today" in this zone
    business_timezone: str = "Asia/Kolkata"

    # Contact form
    message_max_length: int = 1000

    # Mail delivery
    # =================================================================
    # MAIL_PROVIDER selects how notifications leave the building:
    #   smtp   - SMTP relay with STARTTLS + password (Gmail App Password)
    #   oauth2 - SMTP relay with XOAUTH2, token from the refresh-token grant
    #   api    - transactional email HTTP API (Brevo-style JSON endpoint)
    #   mock   - keep messages in memory (development only)
    #
    # Example .env configuration for Gmail:
    #   MAIL_PROVIDER=smtp
    #   SMTP_HOST=smtp.gmail.com
    #   SMTP_PORT=587
    #   SMTP_USER=bookings@dptravels.in
    #   SMTP_PASSWORD=xxxx xxxx xxxx xxxx
    #   RECEIVER_EMAIL=owner@dptravels.in
    # =================================================================
    mail_provider: str = "smtp"
    mail_max_attempts: int = 2
    mail_retry_delay: float = 2.0

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_timeout: float = 30.0

    oauth2_client_id: str = ""
    oauth2_client_secret: str = ""
    oauth2_refresh_token: str = ""
    oauth2_token_url: str = "https://oauth2.googleapis.com/token"

    mail_api_key: str = ""
    mail_api_url: str = "https://api.brevo.com/v3/smtp/email"

    from_email: Optional[str] = None      # Sender address (defaults to smtp_user)
    receiver_email: Optional[str] = None  # Business inbox (defaults to sender)

    @property
    def sender_address(self) -> str:
        return self.from_email or self.smtp_user

    @property
    def receiver_address(self) -> str:
        return self.receiver_email or self.sender_address

    @property
    def cors_origins_list(self) -> list[str]:
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
