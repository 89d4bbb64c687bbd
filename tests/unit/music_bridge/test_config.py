"""Unit tests for configuration."""

from unittest.mock import patch

import pytest

from music_bridge.config import Settings


def test_settings_defaults():
    """Test Settings model has correct defaults."""
    settings = Settings(ytmusic_client_id="id", ytmusic_client_secret="secret")

    assert settings.api_host == "127.0.0.1"
    assert settings.api_port == 8000
    assert settings.ytmusic_client_name == "WEB_REMIX"
    assert settings.ytmusic_api_base_url == "https://music.youtube.com/youtubei/v1/"
    assert settings.log_level == "INFO"


def test_settings_blank_credentials_rejected():
    """Test whitespace-only client credentials are rejected."""
    with pytest.raises(ValueError):
        Settings(ytmusic_client_id="   ", ytmusic_client_secret="secret")


def test_settings_invalid_url_rejected():
    """Test endpoint settings must be http(s) URLs."""
    with pytest.raises(ValueError):
        Settings(ytmusic_client_id="id", ytmusic_client_secret="secret", ytmusic_token_url="oauth2.googleapis.com")


def test_settings_base_url_gets_trailing_slash():
    """Test the API base URL always ends with a slash."""
    settings = Settings(
        ytmusic_client_id="id",
        ytmusic_client_secret="secret",
        ytmusic_api_base_url="https://music.youtube.com/youtubei/v1",
    )

    assert settings.ytmusic_api_base_url.endswith("/v1/")


def test_settings_log_level_normalized():
    """Test log level is upper-cased and validated."""
    assert Settings(ytmusic_client_id="id", ytmusic_client_secret="s", log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValueError):
        Settings(ytmusic_client_id="id", ytmusic_client_secret="s", log_level="chatty")


def test_settings_env_loading():
    """Test settings can load from environment."""
    with patch.dict(
        "os.environ",
        {
            "YTMUSIC_CLIENT_ID": "env-client",
            "YTMUSIC_CLIENT_SECRET": "env-secret",
            "API_PORT": "9000",
            "YTMUSIC_REGION": "GB",
        },
    ):
        settings = Settings()

    assert settings.ytmusic_client_id == "env-client"
    assert settings.api_port == 9000
    assert settings.ytmusic_region == "GB"
