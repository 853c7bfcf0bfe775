"""
OAuth 2.0 token acquisition for Twitch.

This package obtains and refreshes a Twitch access token for a local
client application and keeps it in a JSON credential record:
- With a stored refresh token, the token is refreshed directly
- Without one, the browser authorization code flow runs against a
  one-shot listener on http://localhost:8080/

Public API:
    TwitchOAuthConfig: Runtime configuration
    Credential: Credential record
    CredentialStore: File-based record persistence
    TokenExchangeClient: Token endpoint client
    OAuthCallbackListener: One-shot redirect listener
    run_authorization_flow: Interactive authorization code capture
    OAuthCoordinator: High-level OAuth interface

Exceptions:
    TwitchOAuthError: Base exception
    ConfigurationError: Record or configuration unreadable/invalid
    PreconditionError: client_id or client_secret missing
    AuthorizationError: Authorization flow error
    ListenerError: Redirect listener bind/accept failed
    AuthorizationCancelledError: Wait for redirect cancelled
    CodeExtractionError: No code in redirect request
    TokenExchangeError: Token request failed
    TokenEndpointError: Token endpoint returned an error status
    UnexpectedStatusError: Token endpoint returned an unexpected status
    ResponseParseError: Token response was not JSON
    TokenStorageError: Record could not be written
    TokenNotAvailableError: No access token stored
"""

from .auth_flow import (
    OAuthCallbackListener,
    build_authorize_url,
    extract_authorization_code,
    run_authorization_flow,
)
from .config import TwitchOAuthConfig
from .coordinator import AuthPath, OAuthCoordinator
from .credential_store import Credential, CredentialStore
from .exceptions import (
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
from .token_client import (
    GrantType,
    StatusCategory,
    TokenExchangeClient,
    TokenPair,
    classify_status,
)

__all__ = [
    # Configuration
    "TwitchOAuthConfig",
    # Credential storage
    "Credential",
    "CredentialStore",
    # Token endpoint
    "GrantType",
    "StatusCategory",
    "TokenExchangeClient",
    "TokenPair",
    "classify_status",
    # Authorization flow
    "OAuthCallbackListener",
    "build_authorize_url",
    "extract_authorization_code",
    "run_authorization_flow",
    # Coordinator
    "AuthPath",
    "OAuthCoordinator",
    # Exceptions
    "TwitchOAuthError",
    "ConfigurationError",
    "PreconditionError",
    "AuthorizationError",
    "ListenerError",
    "AuthorizationCancelledError",
    "CodeExtractionError",
    "TokenExchangeError",
    "TokenEndpointError",
    "UnexpectedStatusError",
    "ResponseParseError",
    "TokenStorageError",
    "TokenNotAvailableError",
]
