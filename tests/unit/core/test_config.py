import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from suricate.core.config import Settings, get_settings


def test_settings_defaults():
    """Test that settings load with correct defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.environment == "development"
    assert settings.app_id == ""
    assert settings.api_key == ""
    assert settings.database == ""
    assert settings.base_url == "https://services.cloud.mongodb.com"
    assert settings.service_name == "mongodb-atlas"
    assert settings.request_timeout == 30.0
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.is_development is True
    assert settings.is_production is False
    assert settings.is_testing is False


def test_settings_env_override():
    """Test that environment variables override defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {
        "SURICATE_APP_ID": "app-abcde",
        "SURICATE_API_KEY": "secret",
        "SURICATE_DATABASE": "shop",
        "SURICATE_ENVIRONMENT": "production",
        "SURICATE_REQUEST_TIMEOUT": "5.5",
    }):
        settings = Settings(_env_file=None)

        assert settings.app_id == "app-abcde"
        assert settings.api_key == "secret"
        assert settings.database == "shop"
        assert settings.request_timeout == 5.5
        assert settings.is_production is True
        assert settings.is_development is False


def test_base_url_trailing_slash_removed():
    settings = Settings(_env_file=None, base_url="https://realm.example.com/")
    assert settings.base_url == "https://realm.example.com"


def test_log_level_is_case_insensitive():
    settings = Settings(_env_file=None, log_level="debug")
    assert settings.log_level == "DEBUG"


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="LOUD")


def test_request_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, request_timeout=0)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
