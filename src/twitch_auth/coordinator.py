"""
OAuth coordinator for Twitch token acquisition.

This module provides the main interface for OAuth operations. It decides
between the refresh path and the interactive authorization code path,
drives the chosen path and merges the resulting tokens into the
credential record.
"""

import logging
import threading
from dataclasses import replace
from enum import Enum
from typing import Optional

from .auth_flow import run_authorization_flow
from .config import TwitchOAuthConfig
from .credential_store import Credential, CredentialStore
from .exceptions import PreconditionError, TokenNotAvailableError
from .token_client import TokenExchangeClient, TokenPair

logger = logging.getLogger(__name__)


class AuthPath(Enum):
    """Which grant the coordinator performs for a credential."""

    REFRESH = "refresh"
    AUTHORIZATION_CODE = "authorization_code"


def mask_token(token: str) -> str:
    """Shorten a token for log output."""
    if not token:
        return "<empty>"
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


class OAuthCoordinator:
    """
    High-level coordinator for Twitch OAuth.

    A credential with a refresh token is refreshed directly; one without
    goes through the browser authorization flow first. Either way the
    caller gets back an updated copy and the input is never modified, so a
    failure at any step leaves the loaded record exactly as it was.

    Example:
        coordinator = OAuthCoordinator()
        store = CredentialStore(coordinator.config.credential_file)
        credential = coordinator.refresh_credential(store)
        headers = coordinator.get_authorization_header(credential)
    """

    def __init__(self, config: Optional[TwitchOAuthConfig] = None):
        """
        Initialize OAuth coordinator.

        Args:
            config: OAuth configuration (loads from environment if not provided)
        """
        self.config = config or TwitchOAuthConfig.from_env()

    def select_path(self, credential: Credential) -> AuthPath:
        """
        Choose the grant for a credential.

        Returns:
            REFRESH if a refresh token is stored, AUTHORIZATION_CODE otherwise
        """
        if credential.refresh_token:
            return AuthPath.REFRESH
        return AuthPath.AUTHORIZATION_CODE

    def check_preconditions(self, credential: Credential) -> None:
        """
        Raises:
            PreconditionError: If client_id or client_secret is empty
        """
        if not credential.has_client_credentials:
            raise PreconditionError("Missing info: client_id or client_secret")

    def update_authentication(
        self,
        credential: Credential,
        open_browser: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> Credential:
        """
        Obtain a fresh token pair for a credential.

        No retries and no fallback: a failed refresh is not followed by the
        authorization code flow.

        Args:
            credential: Loaded credential record (not modified)
            open_browser: Whether to auto-open browser for authorization
            cancel_event: Aborts the wait for the browser redirect when set

        Returns:
            Copy of the credential with both token fields replaced

        Raises:
            PreconditionError: If client credentials are missing
            AuthorizationError: If the authorization code flow fails
            TokenExchangeError: If the token request fails
        """
        self.check_preconditions(credential)
        client = TokenExchangeClient(
            credential.client_id, credential.client_secret, self.config
        )

        path = self.select_path(credential)
        if path is AuthPath.REFRESH:
            logger.info("Refresh token found, refreshing access token")
            tokens = client.refresh(credential.refresh_token)
        else:
            logger.info("No refresh token stored, starting authorization flow")
            code = run_authorization_flow(
                credential.client_id,
                credential.scopes,
                self.config,
                open_browser=open_browser,
                cancel_event=cancel_event,
            )
            tokens = client.exchange_code(code)

        return self._apply_tokens(credential, tokens)

    def _apply_tokens(self, credential: Credential, tokens: TokenPair) -> Credential:
        updated = replace(
            credential,
            scopes=list(credential.scopes),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )
        logger.info("Authentication successful.")
        logger.info(f"Access token: {mask_token(updated.access_token)}")
        logger.info(f"Refresh token: {mask_token(updated.refresh_token)}")
        return updated

    def refresh_credential(
        self,
        store: CredentialStore,
        open_browser: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> Credential:
        """
        Load, update and save the credential record.

        The record is written back only after a successful exchange.

        Args:
            store: Credential storage
            open_browser: Whether to auto-open browser for authorization
            cancel_event: Aborts the wait for the browser redirect when set

        Returns:
            The saved, updated credential

        Raises:
            ConfigurationError: If the record cannot be loaded
            PreconditionError: If client credentials are missing
            AuthorizationError: If the authorization code flow fails
            TokenExchangeError: If the token request fails
            TokenStorageError: If the record cannot be written
        """
        credential = store.load()
        updated = self.update_authentication(
            credential, open_browser=open_browser, cancel_event=cancel_event
        )
        store.save(updated)
        return updated

    def revoke(self, store: CredentialStore) -> Credential:
        """
        Forget the stored tokens (local revocation).

        This clears both token fields in the record so the next run goes
        through the authorization flow again. It does NOT revoke the tokens
        on Twitch's servers.

        Returns:
            The saved credential with empty token fields
        """
        credential = store.load()
        cleared = replace(credential, access_token="", refresh_token="")
        store.save(cleared)
        logger.info("Tokens revoked (local). Re-authorization required.")
        return cleared

    def get_authorization_header(self, credential: Credential) -> dict:
        """
        Get Authorization header dict for API requests.

        Returns:
            Dict with Authorization header: {"Authorization": "Bearer <token>"}

        Raises:
            TokenNotAvailableError: If no access token is stored
        """
        if not credential.access_token:
            raise TokenNotAvailableError(
                "No access token available. Run authorization flow first."
            )
        return {"Authorization": f"Bearer {credential.access_token}"}
