"""
OAuth exception classes for Twitch authentication.

This module defines the exception hierarchy for every failure the token
acquisition flow can surface. Nothing in this package retries; each error
propagates to the caller, which decides whether to report it and skip
writing the credential record back.
"""

from typing import Optional


class TwitchOAuthError(Exception):
    """Base exception for all Twitch OAuth errors."""

    pass


class ConfigurationError(TwitchOAuthError):
    """Credential record or runtime configuration is unreadable or invalid."""

    pass


class PreconditionError(TwitchOAuthError):
    """Credential record lacks client_id or client_secret."""

    pass


class AuthorizationError(TwitchOAuthError):
    """OAuth authorization flow error."""

    pass


class ListenerError(AuthorizationError):
    """Local redirect listener could not bind or accept a connection."""

    pass


class AuthorizationCancelledError(ListenerError):
    """Waiting for the redirect was cancelled by the caller."""

    pass


class CodeExtractionError(AuthorizationError):
    """No usable authorization code in the captured redirect request."""

    pass


class TokenExchangeError(TwitchOAuthError):
    """Failed to exchange a code or refresh token for tokens."""

    pass


class TokenEndpointError(TokenExchangeError):
    """
    Token endpoint answered with an error status.

    Attributes:
        status_code: HTTP status returned by the provider
        body: Raw response body (provider error message)
    """

    def __init__(self, status_code: int, body: str, message: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"Error {status_code}: {body}")


class UnexpectedStatusError(TokenEndpointError):
    """Token endpoint answered with a status outside the 2xx/4xx/5xx ranges."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(
            status_code, body, message=f"Unexpected status code: {status_code}"
        )


class ResponseParseError(TokenExchangeError):
    """Successful token response body was not valid JSON."""

    pass


class TokenStorageError(TwitchOAuthError):
    """Credential record could not be written (file I/O error)."""

    pass


class TokenNotAvailableError(TwitchOAuthError):
    """No access token stored (need to authorize first)."""

    pass
