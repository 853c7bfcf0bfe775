"""
Token endpoint client for Twitch OAuth.

Both grant types share one request shape and one response classification:
- Authorization code exchange (code -> access/refresh tokens)
- Refresh token exchange (refresh token -> new access/refresh tokens)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from .config import TwitchOAuthConfig
from .exceptions import (
    ResponseParseError,
    TokenEndpointError,
    TokenExchangeError,
    UnexpectedStatusError,
)

logger = logging.getLogger(__name__)


class GrantType(str, Enum):
    """OAuth grant types sent as grant_type."""

    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class StatusCategory(Enum):
    """How a token endpoint status code is handled."""

    SUCCESS = "success"
    PROVIDER_ERROR = "provider_error"
    UNEXPECTED = "unexpected"


@dataclass
class TokenPair:
    """
    Tokens issued by the token endpoint.

    Attributes:
        access_token: Access token (empty if the provider omitted it)
        refresh_token: Refresh token (empty if the provider omitted it)
    """

    access_token: str
    refresh_token: str


def classify_status(status_code: int) -> StatusCategory:
    """
    Classify a token endpoint status code.

    Args:
        status_code: HTTP status code

    Returns:
        SUCCESS for 2xx, PROVIDER_ERROR for 4xx/5xx, UNEXPECTED otherwise
    """
    if 200 <= status_code <= 299:
        return StatusCategory.SUCCESS
    if 400 <= status_code <= 599:
        return StatusCategory.PROVIDER_ERROR
    return StatusCategory.UNEXPECTED


def _string_field(data, key: str) -> str:
    # Missing, null or non-string fields count as empty
    if isinstance(data, dict):
        value = data.get(key)
        if isinstance(value, str):
            return value
    return ""


class TokenExchangeClient:
    """
    Exchanges authorization codes and refresh tokens at the token endpoint.

    Each call issues exactly one POST; failures are raised, never retried.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        config: Optional[TwitchOAuthConfig] = None,
    ):
        """
        Initialize token client.

        Args:
            client_id: Twitch application client ID
            client_secret: Twitch application client secret
            config: OAuth configuration (defaults if not provided)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.config = config or TwitchOAuthConfig()

    def _build_form(
        self,
        grant_type: GrantType,
        code: Optional[str],
        refresh_token: Optional[str],
    ) -> dict:
        form = {"client_id": self.client_id, "client_secret": self.client_secret}

        if grant_type is GrantType.AUTHORIZATION_CODE:
            if not code:
                raise ValueError("code is required for the authorization_code grant")
            form["code"] = code
            form["grant_type"] = grant_type.value
            form["redirect_uri"] = self.config.redirect_uri
        else:
            if not refresh_token:
                raise ValueError("refresh_token is required for the refresh_token grant")
            form["grant_type"] = grant_type.value
            form["refresh_token"] = refresh_token

        return form

    def exchange(
        self,
        grant_type: GrantType,
        *,
        code: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> TokenPair:
        """
        Exchange a code or refresh token for a new token pair.

        Args:
            grant_type: Which grant to perform
            code: Authorization code (authorization_code grant)
            refresh_token: Refresh token (refresh_token grant)

        Returns:
            TokenPair from the response; absent fields are empty strings

        Raises:
            ValueError: If the value required by grant_type is missing
            TokenEndpointError: If the provider answers 4xx/5xx
            UnexpectedStatusError: If the status is outside 2xx/4xx/5xx
            ResponseParseError: If a 2xx body is not valid JSON
            TokenExchangeError: On network errors
        """
        grant_type = GrantType(grant_type)
        form = self._build_form(grant_type, code, refresh_token)

        logger.info(f"Requesting tokens ({grant_type.value} grant)")

        try:
            response = requests.post(
                self.config.token_url,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                data=form,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Network error during token request: {e}")
            raise TokenExchangeError(f"Network error during token request: {e}") from e

        status = response.status_code
        category = classify_status(status)

        if category is StatusCategory.PROVIDER_ERROR:
            logger.error(f"Token request failed: {status} - {response.text}")
            raise TokenEndpointError(status, response.text)

        if category is StatusCategory.UNEXPECTED:
            logger.error(f"Token request returned unexpected status {status}")
            raise UnexpectedStatusError(status, response.text)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from token endpoint: {e}")
            raise ResponseParseError("Failed parsing json response.") from e

        tokens = TokenPair(
            access_token=_string_field(data, "access_token"),
            refresh_token=_string_field(data, "refresh_token"),
        )
        logger.info("Token request succeeded")
        return tokens

    def exchange_code(self, code: str) -> TokenPair:
        """Exchange an authorization code for tokens."""
        return self.exchange(GrantType.AUTHORIZATION_CODE, code=code)

    def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for new tokens."""
        return self.exchange(GrantType.REFRESH_TOKEN, refresh_token=refresh_token)
