"""
Authorization code capture for Twitch OAuth.

This module opens a short-lived listener on the redirect address, sends
the user's browser to Twitch's authorize page and reads the single
redirect request that comes back carrying the authorization code.

IMPORTANT: The listener accepts exactly one connection. It has no timeout;
pass a cancel event to be able to abort the wait.
"""

import html
import logging
import socket
import threading
import webbrowser
from typing import List, Optional, Sequence
from urllib.parse import parse_qs, quote, urlsplit

from .config import TwitchOAuthConfig
from .exceptions import (
    AuthorizationCancelledError,
    AuthorizationError,
    CodeExtractionError,
    ListenerError,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "HEAD", "PUT", "DELETE", "OPTIONS", "PATCH")

RESPONSE_PAGE = """<html>
<head><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px;">
    <h1>{title}</h1>
    <p>{message}</p>
    <p style="margin-top: 30px; color: #666;">You can close this window.</p>
</body>
</html>"""


def build_authorize_url(
    client_id: str, scopes: Sequence[str], config: Optional[TwitchOAuthConfig] = None
) -> str:
    """
    Build the Twitch authorize URL.

    Args:
        client_id: Twitch application client ID
        scopes: Requested scopes; joined with "+" in the given order
        config: OAuth configuration (defaults if not provided)

    Returns:
        Complete authorize URL with query parameters
    """
    config = config or TwitchOAuthConfig()
    scope = "+".join(quote(s, safe=":") for s in scopes)
    return (
        f"{config.authorization_url}?client_id={quote(client_id, safe='')}"
        f"&redirect_uri={config.redirect_uri}"
        f"&response_type=code&scope={scope}"
    )


def _request_target(raw_request: str) -> str:
    lines = raw_request.splitlines()
    first_line = lines[0].strip() if lines else ""
    parts = first_line.split()
    if len(parts) >= 2 and parts[0].upper() in HTTP_METHODS:
        return parts[1]
    return first_line


def extract_authorization_code(raw_request: str) -> str:
    """
    Extract the authorization code from a captured redirect request.

    Accepts either a raw HTTP request ("GET /?code=...&scope=... HTTP/1.1")
    or a bare target/query string ("/?code=..." or "code=...").

    Args:
        raw_request: Text of the redirect request

    Returns:
        The authorization code

    Raises:
        AuthorizationError: If Twitch redirected with an error (e.g. the
                            user denied access)
        CodeExtractionError: If no non-empty code is present
    """
    target = _request_target(raw_request)
    split = urlsplit(target)
    query = split.query if "?" in target else target.lstrip("/")
    params = parse_qs(query, keep_blank_values=True)

    error = params.get("error")
    if error:
        description = params.get("error_description", ["Unknown error"])[0]
        logger.error(f"OAuth error: {error[0]} - {description}")
        raise AuthorizationError(f"Authorization failed: {error[0]} - {description}")

    codes: List[str] = params.get("code", [])
    if not codes:
        raise CodeExtractionError("No authorization code in redirect request")

    code = codes[0].strip()
    if not code:
        raise CodeExtractionError("Failed to get code.")

    return code


class OAuthCallbackListener:
    """
    One-shot local listener for the OAuth redirect.

    The listener:
    1. Binds to the configured host/port (localhost:8080 by default)
    2. Accepts exactly one connection
    3. Reads the raw redirect request (up to read_buffer_size bytes)
    4. Optionally answers the browser with a short HTML page
    5. Releases the sockets
    """

    def __init__(self, config: Optional[TwitchOAuthConfig] = None):
        """
        Initialize callback listener.

        Args:
            config: OAuth configuration with listener settings
        """
        self.config = config or TwitchOAuthConfig()
        self._socket: Optional[socket.socket] = None
        self._connection: Optional[socket.socket] = None

    def __enter__(self) -> "OAuthCallbackListener":
        self.bind()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def port(self) -> int:
        """Port actually bound (differs from config when configured as 0)."""
        if self._socket is None:
            return self.config.callback_port
        return self._socket.getsockname()[1]

    def bind(self) -> None:
        """
        Bind the listener.

        Raises:
            ListenerError: If the address cannot be bound (e.g. port in use)
        """
        address = (self.config.callback_host, self.config.callback_port)
        try:
            self._socket = socket.create_server(address)
        except OSError as e:
            raise ListenerError(
                f"Could not listen on {address[0]}:{address[1]}: {e}"
            ) from e

        logger.info(f"Listening for OAuth redirect on {address[0]}:{self.port}")

    def _accept(self, cancel_event: Optional[threading.Event]) -> socket.socket:
        if cancel_event is None:
            self._socket.settimeout(None)
            connection, _ = self._socket.accept()
            return connection

        self._socket.settimeout(self.config.accept_poll_interval)
        while not cancel_event.is_set():
            try:
                connection, _ = self._socket.accept()
            except socket.timeout:
                continue
            connection.settimeout(None)
            return connection

        raise AuthorizationCancelledError(
            "Authorization cancelled while waiting for redirect"
        )

    def wait_for_request(self, cancel_event: Optional[threading.Event] = None) -> str:
        """
        Wait for the redirect and read the raw request.

        Blocks until one connection arrives. There is no timeout.

        Args:
            cancel_event: Set it from another thread to abort the wait

        Returns:
            Raw request text

        Raises:
            ListenerError: If the listener is not bound or accept fails
            AuthorizationCancelledError: If cancel_event was set
            CodeExtractionError: If the connection sent no data or
                                 non-UTF-8 data
        """
        if self._socket is None:
            raise ListenerError("Listener is not bound")

        logger.info("Waiting for OAuth redirect")

        try:
            self._connection = self._accept(cancel_event)
            data = self._connection.recv(self.config.read_buffer_size)
        except OSError as e:
            raise ListenerError(f"Failed to accept redirect connection: {e}") from e

        if not data:
            raise CodeExtractionError("Failed reading stream buffer: empty stream")

        try:
            request = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodeExtractionError(f"Redirect request is not valid UTF-8: {e}") from e

        logger.debug(f"Received redirect request ({len(data)} bytes)")
        return request

    def respond(self, success: bool, message: str) -> None:
        """
        Answer the browser on the accepted connection (best effort).

        Args:
            success: Whether authorization succeeded
            message: Text shown in the page body
        """
        if self._connection is None:
            return

        title = "Authorization Successful" if success else "Authorization Failed"
        status = "200 OK" if success else "400 Bad Request"
        body = RESPONSE_PAGE.format(title=title, message=html.escape(message)).encode(
            "utf-8"
        )
        head = (
            f"HTTP/1.1 {status}\r\n"
            f"Content-Type: text/html; charset=utf-8\r\n"
            f"Content-Length: {len(body)}\r\n"
            f"Connection: close\r\n\r\n"
        ).encode("ascii")

        try:
            self._connection.sendall(head + body)
        except OSError as e:
            logger.warning(f"Could not answer browser: {e}")

    def close(self) -> None:
        """Release the connection and the listening socket."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None
            logger.debug("OAuth redirect listener closed")


def run_authorization_flow(
    client_id: str,
    scopes: Sequence[str],
    config: Optional[TwitchOAuthConfig] = None,
    open_browser: bool = True,
    cancel_event: Optional[threading.Event] = None,
) -> str:
    """
    Run the interactive authorization flow and return the code.

    This function:
    1. Binds the redirect listener
    2. Builds the authorize URL
    3. Opens browser (or displays URL)
    4. Waits for the single redirect request
    5. Returns the authorization code

    Args:
        client_id: Twitch application client ID
        scopes: Requested scopes
        config: OAuth configuration
        open_browser: Whether to automatically open browser (default: True)
        cancel_event: Optional event that aborts the wait when set

    Returns:
        Authorization code

    Raises:
        ListenerError: If the listener cannot bind or accept
        AuthorizationCancelledError: If cancel_event was set
        AuthorizationError: If Twitch redirected with an error
        CodeExtractionError: If no code could be read from the redirect
    """
    config = config or TwitchOAuthConfig()

    with OAuthCallbackListener(config) as listener:
        auth_url = build_authorize_url(client_id, scopes, config)

        print("\n" + "=" * 70)
        print("TWITCH OAUTH AUTHORIZATION")
        print("=" * 70)
        print("\nPlease authorize the application by visiting:")
        print(f"\n  {auth_url}\n")

        if open_browser:
            logger.info("Opening auth_url")
            try:
                if not webbrowser.open(auth_url):
                    logger.warning("No browser available to open the authorize URL")
            except Exception as e:
                logger.warning(f"Error opening URL: {e}")
                print("   Please copy the URL above and paste it in your browser.")
        else:
            print("Copy the URL above and paste it in your browser.")

        print("\nWaiting for authorization...")
        print("=" * 70 + "\n")

        request = listener.wait_for_request(cancel_event)

        try:
            code = extract_authorization_code(request)
        except AuthorizationError as e:
            listener.respond(False, str(e))
            raise

        listener.respond(True, "You can return to the terminal.")
        logger.info("Authorization code received successfully")
        return code
