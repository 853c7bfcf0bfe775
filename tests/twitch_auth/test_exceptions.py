"""Tests for OAuth exceptions."""

import pytest

from twitch_auth.exceptions import (
    AuthorizationCancelledError,
    AuthorizationError,
    CodeExtractionError,
    ConfigurationError,
    ListenerError,
    PreconditionError,
    ResponseParseError,
    TokenEndpointError,
    TokenExchangeError,
    TokenNotAvailableError,
    TokenStorageError,
    TwitchOAuthError,
    UnexpectedStatusError,
)


class TestOAuthExceptions:
    """Tests for OAuth exception hierarchy."""

    def test_twitch_oauth_error_is_base_exception(self):
        """TwitchOAuthError is base for all OAuth errors."""
        error = TwitchOAuthError("test error")
        assert isinstance(error, Exception)
        assert str(error) == "test error"

    def test_listener_errors_are_authorization_errors(self):
        """Listener and extraction errors are AuthorizationErrors."""
        assert isinstance(ListenerError("bind"), AuthorizationError)
        assert isinstance(AuthorizationCancelledError("cancel"), ListenerError)
        assert isinstance(CodeExtractionError("no code"), AuthorizationError)

    def test_token_endpoint_error_carries_status_and_body(self):
        """TokenEndpointError exposes status code and raw body."""
        error = TokenEndpointError(400, '{"error":"invalid_grant"}')

        assert isinstance(error, TokenExchangeError)
        assert error.status_code == 400
        assert error.body == '{"error":"invalid_grant"}'
        assert str(error) == 'Error 400: {"error":"invalid_grant"}'

    def test_unexpected_status_error_message(self):
        """UnexpectedStatusError names the status code."""
        error = UnexpectedStatusError(302, "")

        assert isinstance(error, TokenEndpointError)
        assert error.status_code == 302
        assert str(error) == "Unexpected status code: 302"

    def test_exceptions_can_be_caught_as_base_type(self):
        """All OAuth exceptions can be caught as TwitchOAuthError."""
        exceptions = [
            ConfigurationError("error"),
            PreconditionError("error"),
            AuthorizationError("error"),
            ListenerError("error"),
            CodeExtractionError("error"),
            TokenExchangeError("error"),
            TokenEndpointError(500, "error"),
            UnexpectedStatusError(600),
            ResponseParseError("error"),
            TokenStorageError("error"),
            TokenNotAvailableError("error"),
        ]

        for exc in exceptions:
            with pytest.raises(TwitchOAuthError):
                raise exc
