"""Tests for OAuth configuration module."""

from unittest import mock

import pytest

from twitch_auth.config import TwitchOAuthConfig
from twitch_auth.exceptions import ConfigurationError


class TestTwitchOAuthConfig:
    """Tests for TwitchOAuthConfig class."""

    def test_config_defaults(self):
        """Config defaults point at Twitch and localhost:8080."""
        config = TwitchOAuthConfig()

        assert config.authorization_url == "https://id.twitch.tv/oauth2/authorize"
        assert config.token_url == "https://id.twitch.tv/oauth2/token"
        assert config.callback_host == "localhost"
        assert config.callback_port == 8080
        assert config.credential_file == "config.json"
        assert config.read_buffer_size == 1024

    def test_redirect_uri_default(self):
        """redirect_uri is the fixed local redirect URL by default."""
        assert TwitchOAuthConfig().redirect_uri == "http://localhost:8080/"

    def test_redirect_uri_follows_listener_settings(self):
        """redirect_uri uses the configured host and port."""
        config = TwitchOAuthConfig(callback_host="127.0.0.1", callback_port=9000)

        assert config.redirect_uri == "http://127.0.0.1:9000/"

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_config_validates_port_range(self, port):
        """Config rejects ports outside 0-65535."""
        with pytest.raises(ConfigurationError, match="callback_port must be between"):
            TwitchOAuthConfig(callback_port=port)

    def test_config_validates_buffer_size(self):
        """Config rejects a non-positive read buffer."""
        with pytest.raises(ConfigurationError, match="read_buffer_size"):
            TwitchOAuthConfig(read_buffer_size=0)

    def test_config_validates_timeout(self):
        """Config rejects a non-positive timeout but accepts None."""
        with pytest.raises(ConfigurationError, match="request_timeout"):
            TwitchOAuthConfig(request_timeout=0)

        assert TwitchOAuthConfig(request_timeout=None).request_timeout is None

    @mock.patch.dict(
        "os.environ",
        {
            "TWITCH_CREDENTIAL_FILE": "/tmp/twitch.json",
            "TWITCH_CALLBACK_HOST": "127.0.0.1",
            "TWITCH_CALLBACK_PORT": "9090",
            "TWITCH_REQUEST_TIMEOUT": "5",
        },
    )
    def test_from_env(self):
        """from_env reads the TWITCH_* variables."""
        config = TwitchOAuthConfig.from_env()

        assert config.credential_file == "/tmp/twitch.json"
        assert config.callback_host == "127.0.0.1"
        assert config.callback_port == 9090
        assert config.request_timeout == 5.0

    @mock.patch.dict("os.environ", {}, clear=True)
    def test_from_env_defaults(self):
        """from_env falls back to defaults when nothing is set."""
        config = TwitchOAuthConfig.from_env()

        assert config.credential_file == "config.json"
        assert config.redirect_uri == "http://localhost:8080/"

    @mock.patch.dict("os.environ", {"TWITCH_CALLBACK_PORT": "eighty"})
    def test_from_env_rejects_bad_port(self):
        """from_env raises ConfigurationError for a non-integer port."""
        with pytest.raises(ConfigurationError, match="TWITCH_CALLBACK_PORT"):
            TwitchOAuthConfig.from_env()
