"""
Runtime configuration for Twitch OAuth.

Endpoints, the local redirect listener and the credential record location
live here. The client credentials themselves are not configuration; they
are read from the credential record (see credential_store).
"""

import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError


@dataclass
class TwitchOAuthConfig:
    """
    Configuration for Twitch OAuth 2.0.

    Attributes:
        authorization_url: Twitch OAuth authorization endpoint
        token_url: Twitch OAuth token endpoint
        callback_host: Host the redirect listener binds to (default: localhost)
        callback_port: Port the redirect listener binds to (default: 8080,
            0 picks a free port)
        credential_file: Path to the JSON credential record
        request_timeout: Seconds before a token request is abandoned
            (None waits forever)
        read_buffer_size: Maximum bytes read from the redirect request
        accept_poll_interval: Seconds between cancellation checks while
            waiting for the redirect
    """

    # Twitch OAuth endpoints
    authorization_url: str = "https://id.twitch.tv/oauth2/authorize"
    token_url: str = "https://id.twitch.tv/oauth2/token"

    # Redirect listener; must match the redirect URL registered with Twitch
    callback_host: str = "localhost"
    callback_port: int = 8080

    credential_file: str = "config.json"

    request_timeout: Optional[float] = 30.0
    read_buffer_size: int = 1024
    accept_poll_interval: float = 0.5

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.callback_port, int) or not (
            0 <= self.callback_port <= 65535
        ):
            raise ConfigurationError(
                f"callback_port must be between 0 and 65535, got {self.callback_port}"
            )

        if self.read_buffer_size <= 0:
            raise ConfigurationError("read_buffer_size must be positive")

        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

        if self.accept_poll_interval <= 0:
            raise ConfigurationError("accept_poll_interval must be positive")

    @property
    def redirect_uri(self) -> str:
        """
        Redirect URI sent to Twitch in both the authorize and token requests.

        Returns:
            Local redirect URL (e.g., http://localhost:8080/)
        """
        return f"http://{self.callback_host}:{self.callback_port}/"

    @classmethod
    def from_env(cls) -> "TwitchOAuthConfig":
        """
        Load configuration from environment variables.

        Optional environment variables:
            TWITCH_CREDENTIAL_FILE: Credential record path (default: config.json)
            TWITCH_CALLBACK_HOST: Redirect listener host (default: localhost)
            TWITCH_CALLBACK_PORT: Redirect listener port (default: 8080)
            TWITCH_REQUEST_TIMEOUT: Token request timeout in seconds (default: 30)

        Returns:
            TwitchOAuthConfig instance

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        port = os.environ.get("TWITCH_CALLBACK_PORT", "8080")
        timeout = os.environ.get("TWITCH_REQUEST_TIMEOUT", "30")

        try:
            callback_port = int(port)
        except ValueError as e:
            raise ConfigurationError(
                f"TWITCH_CALLBACK_PORT must be an integer, got {port!r}"
            ) from e

        try:
            request_timeout = float(timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"TWITCH_REQUEST_TIMEOUT must be a number, got {timeout!r}"
            ) from e

        return cls(
            callback_host=os.environ.get("TWITCH_CALLBACK_HOST", "localhost"),
            callback_port=callback_port,
            credential_file=os.environ.get("TWITCH_CREDENTIAL_FILE", "config.json"),
            request_timeout=request_timeout,
        )
