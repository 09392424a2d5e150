"""Unit tests for configuration module."""

import pytest

from gmail_connector.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.api_base_url == "https://gmail.googleapis.com/gmail/v1"
        assert settings.user_id == "me"
        assert settings.query_charset == "utf-8"
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.gmail_scopes == ["https://www.googleapis.com/auth/gmail.modify"]

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("GMAIL_CONNECTOR_USER_ID", "someone@example.com")
        monkeypatch.setenv("GMAIL_CONNECTOR_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("GMAIL_CONNECTOR_REQUEST_TIMEOUT", "5.5")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.user_id == "someone@example.com"
        assert settings.log_level == "DEBUG"
        assert settings.request_timeout == 5.5

        # Clean up
        get_settings.cache_clear()

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()
