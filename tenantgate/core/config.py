"""
Application configuration module.

Provides centralized, environment-safe configuration management
with sensible defaults for the authorization engine.
"""

import logging
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Environment variables should be prefixed with TENANTGATE_.

    Attributes:
        APP_NAME: Application name.
        APP_VERSION: Application version.
        ENVIRONMENT: Deployment environment name.
        DEBUG: Debug mode flag.
        SECRET_KEY: Key used to verify session tokens.
        ALGORITHM: JWT signing algorithm.
        TOKEN_AUDIENCE: Expected token audience, if any.
        DATABASE_URL: SQLAlchemy database URL.
        LOG_LEVEL: Logging level.
        LOG_FORMAT: "json" for production, "console" for development.
        REFRESH_ACTOR_FROM_DATABASE: Re-read role and organization from
            the user table on every request instead of trusting token claims.
    """

    # Application metadata
    APP_NAME: str = Field(default="TenantGate Authorization Service")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Session token verification
    SECRET_KEY: str = Field(default="change-me-in-production-at-least-32-chars")
    ALGORITHM: str = Field(default="HS256")
    TOKEN_AUDIENCE: Optional[str] = Field(default=None)

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./tenantgate.db")

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json")

    # Actor resolution
    REFRESH_ACTOR_FROM_DATABASE: bool = Field(default=True)

    model_config = {
        "env_prefix": "TENANTGATE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(
            f"Settings loaded: app_name={_settings.APP_NAME}, "
            f"environment={_settings.ENVIRONMENT}"
        )
    return _settings


settings = get_settings()
