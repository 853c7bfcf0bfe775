"""
Twitch OAuth command line entry point.

Reads the credential record, refreshes the tokens (or runs the browser
authorization flow when no refresh token is stored) and writes the record
back on success.

Usage:
    twitch-auth
    twitch-auth --config path/to/config.json
    twitch-auth --no-browser

    # Forget stored tokens and force re-authorization
    twitch-auth --revoke

Prerequisites:
    - client_id and client_secret filled in the credential record
    - http://localhost:8080/ registered as a redirect URL of the Twitch app
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import TwitchOAuthConfig
from .coordinator import OAuthCoordinator
from .credential_store import CredentialStore
from .exceptions import ConfigurationError, PreconditionError, TwitchOAuthError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for the command line tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def authorize(
    coordinator: OAuthCoordinator, store: CredentialStore, open_browser: bool = True
) -> int:
    """
    Run the token update.

    Args:
        coordinator: OAuth coordinator
        store: Credential storage
        open_browser: Whether to automatically open browser

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        coordinator.refresh_credential(store, open_browser=open_browser)
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 1
    except PreconditionError as e:
        logger.error(f"❌ {e}")
        logger.error(f"   Fill in client_id and client_secret in {store.path}")
        return 1
    except TwitchOAuthError as e:
        logger.error(f"❌ Error updating Twitch authentication: {e}")
        return 1

    logger.info(f"✅ Tokens saved to: {store.path}")
    return 0


def revoke(coordinator: OAuthCoordinator, store: CredentialStore) -> int:
    """
    Revoke current authorization.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        coordinator.revoke(store)
    except TwitchOAuthError as e:
        logger.error(f"❌ Error revoking authorization: {e}")
        return 1

    logger.info("✅ Authorization revoked")
    logger.info("Run this command again to re-authorize")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twitch-auth",
        description="Obtain or refresh a Twitch OAuth access token",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  TWITCH_CREDENTIAL_FILE   Credential record path (default: config.json)
  TWITCH_CALLBACK_HOST     Redirect listener host (default: localhost)
  TWITCH_CALLBACK_PORT     Redirect listener port (default: 8080)
  TWITCH_REQUEST_TIMEOUT   Token request timeout in seconds (default: 30)
        """,
    )
    parser.add_argument(
        "--config",
        dest="credential_file",
        help="Path to the credential record (overrides TWITCH_CREDENTIAL_FILE)",
    )
    parser.add_argument(
        "--revoke",
        action="store_true",
        help="Clear stored tokens so the next run re-authorizes",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't automatically open browser (display URL only)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = TwitchOAuthConfig.from_env()
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 1

    if args.credential_file:
        config.credential_file = args.credential_file

    logger.info(f"Using credential record {config.credential_file}")

    coordinator = OAuthCoordinator(config)
    store = CredentialStore(config.credential_file)

    if args.revoke:
        return revoke(coordinator, store)

    return authorize(coordinator, store, open_browser=not args.no_browser)


if __name__ == "__main__":
    sys.exit(main())
