"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (bot token, reviewer chat, redirect URLs)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal, List

from app.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Required values are checked by validate_settings() on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Telegram
    BOT_TOKEN: Optional[str] = Field(
        default=None,
        description="Telegram bot token (required)"
    )
    ADMIN_CHAT_ID: Optional[str] = Field(
        default=None,
        description="Chat that receives submissions and decision buttons (required)"
    )
    TELEGRAM_API_BASE: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    TELEGRAM_TIMEOUT: float = Field(
        default=10.0,
        description="Telegram request timeout in seconds"
    )
    TELEGRAM_MODE: Literal["polling", "webhook"] = Field(
        default="polling",
        description="How inbound updates are received"
    )
    TELEGRAM_POLL_TIMEOUT: int = Field(
        default=30,
        description="Long-poll timeout for getUpdates in seconds"
    )
    TELEGRAM_WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="Expected X-Telegram-Bot-Api-Secret-Token header in webhook mode"
    )

    # Redirects
    WEBAPP_URL: Optional[str] = Field(
        default=None,
        description="Redirect target for GET /webapp"
    )
    WEBSITE_URL: Optional[str] = Field(
        default=None,
        description="Redirect target for GET /website"
    )

    # Timers
    TYPING_INTERVAL_SECONDS: float = Field(
        default=4.0,
        description="Period of the typing chat action while a decision is pending"
    )
    MESSAGE_TTL_SECONDS: float = Field(
        default=30 * 60,
        description="Delay before an ephemeral message is deleted"
    )
    SUBMISSION_TTL_SECONDS: Optional[float] = Field(
        default=None,
        description="Evict pending submissions older than this (disabled when unset)"
    )

    # Application
    PORT: int = Field(
        default=3000,
        description="HTTP listening port"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("BOT_TOKEN", "ADMIN_CHAT_ID", "WEBAPP_URL", "WEBSITE_URL", "TELEGRAM_WEBHOOK_SECRET")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty environment values as unset."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def validate_settings(config: Optional[Settings] = None) -> bool:
    """
    Validates critical settings on application startup.
    Raises ConfigurationError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []

    if not config.BOT_TOKEN:
        errors.append("BOT_TOKEN is not set")

    if not config.ADMIN_CHAT_ID:
        errors.append("ADMIN_CHAT_ID is not set")

    if config.TYPING_INTERVAL_SECONDS <= 0:
        errors.append("TYPING_INTERVAL_SECONDS must be positive")

    if config.MESSAGE_TTL_SECONDS <= 0:
        errors.append("MESSAGE_TTL_SECONDS must be positive")

    if config.SUBMISSION_TTL_SECONDS is not None and config.SUBMISSION_TTL_SECONDS <= 0:
        errors.append("SUBMISSION_TTL_SECONDS must be positive when set")

    if errors:
        raise ConfigurationError(
            f"Configuration validation failed: {', '.join(errors)}",
            details=errors
        )

    return True
