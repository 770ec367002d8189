"""Unit tests for configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings

REQUIRED_ENV = {
    "SUPABASE_URL": "https://test.supabase.co",
    "SUPABASE_SECRET_KEY": "test-secret",
}


class TestSettings:
    """Tests for Settings class."""

    def test_settings_loads_from_environment(self) -> None:
        """Test that Settings loads values from environment variables."""
        env_vars = {
            **REQUIRED_ENV,
            "APP_NAME": "test-app",
            "APP_ENV": "testing",
            "DEBUG": "true",
            "PORT": "9000",
            "PRINTFUL_TIMEOUT_SECONDS": "3.5",
            "ORDER_NUMBER_PREFIX": "ABC",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings(_env_file=None)

            assert settings.app_name == "test-app"
            assert settings.app_env == "testing"
            assert settings.debug is True
            assert settings.port == 9000
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.printful_timeout_seconds == 3.5
            assert settings.order_number_prefix == "ABC"

    def test_settings_cors_origins_list(self) -> None:
        """Test that CORS origins are correctly parsed into a list."""
        env_vars = {
            **REQUIRED_ENV,
            "CORS_ORIGINS": "http://localhost:3000, http://example.com , ,http://test.com",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            origins = Settings(_env_file=None).cors_origins_list

            assert origins == ["http://localhost:3000", "http://example.com", "http://test.com"]

    def test_settings_is_production_property(self) -> None:
        """Test the is_production property."""
        with patch.dict(os.environ, {**REQUIRED_ENV, "APP_ENV": "production"}, clear=False):
            assert Settings(_env_file=None).is_production is True

        with patch.dict(os.environ, {**REQUIRED_ENV, "APP_ENV": "development"}, clear=False):
            assert Settings(_env_file=None).is_production is False

    def test_printful_requires_token_and_store_id(self) -> None:
        """Test that Printful counts as configured only with both credentials."""
        env_vars = {**REQUIRED_ENV, "PRINTFUL_ACCESS_TOKEN": "token", "PRINTFUL_STORE_ID": ""}

        with patch.dict(os.environ, env_vars, clear=False):
            assert Settings(_env_file=None).is_printful_configured is False

        env_vars["PRINTFUL_STORE_ID"] = "42"
        with patch.dict(os.environ, env_vars, clear=False):
            assert Settings(_env_file=None).is_printful_configured is True

    def test_email_configured_follows_resend_key(self) -> None:
        """Test that an empty Resend key means email is not configured."""
        with patch.dict(os.environ, {**REQUIRED_ENV, "RESEND_API_KEY": ""}, clear=False):
            assert Settings(_env_file=None).is_email_configured is False

        with patch.dict(os.environ, {**REQUIRED_ENV, "RESEND_API_KEY": "re_123"}, clear=False):
            assert Settings(_env_file=None).is_email_configured is True

    def test_settings_requires_supabase(self) -> None:
        """Test that missing Supabase credentials raise a validation error."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same instance."""
        get_settings.cache_clear()

        first = get_settings()
        second = get_settings()

        assert first is second

        get_settings.cache_clear()
