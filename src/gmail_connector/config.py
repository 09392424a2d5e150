"""Configuration management for Gmail Connector.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the GMAIL_CONNECTOR_ prefix (e.g., GMAIL_CONNECTOR_USER_ID).
    """

    model_config = SettingsConfigDict(
        env_prefix="GMAIL_CONNECTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gmail API
    api_base_url: str = Field(
        default="https://gmail.googleapis.com/gmail/v1",
        description="Base URL every resource path is appended to",
    )
    user_id: str = Field(
        default="me",
        description="Mailbox owner used when an operation is not given a user id",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout for Gmail API requests in seconds",
    )
    query_charset: str = Field(
        default="utf-8",
        description="Charset used when percent-encoding free-text search queries",
    )

    # OAuth2
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to Gmail API client secrets file",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the cached OAuth2 token file",
    )
    gmail_scopes: list[str] = Field(
        default_factory=lambda: ["https://www.googleapis.com/auth/gmail.modify"],
        description=(
            "OAuth scopes requested for Gmail access. gmail.modify covers sending, "
            "reading and trashing; permanent deletion additionally needs https://mail.google.com/."
        ),
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
