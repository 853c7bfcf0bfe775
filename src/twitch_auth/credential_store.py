"""
Credential record persistence for Twitch OAuth.

The record holds the client credentials, the requested scopes and the
latest token pair. It is stored as pretty-printed JSON so it can be edited
by hand: fill in client_id, client_secret and scopes, then run the
authorization flow to populate the tokens.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .exceptions import ConfigurationError, TokenStorageError

logger = logging.getLogger(__name__)

# Access token is stored under this key on disk
ACCESS_TOKEN_KEY = "oauth_token"


@dataclass
class Credential:
    """
    Stored credential record.

    Attributes:
        client_id: Twitch application client ID
        client_secret: Twitch application client secret
        scopes: Requested OAuth scopes, in request order
        refresh_token: Refresh token from the last grant (empty if none)
        access_token: Latest issued access token
    """

    client_id: str = ""
    client_secret: str = ""
    scopes: List[str] = field(default_factory=list)
    refresh_token: str = ""
    access_token: str = ""

    @property
    def has_client_credentials(self) -> bool:
        """True if both client_id and client_secret are set."""
        return bool(self.client_id) and bool(self.client_secret)

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary using the on-disk field names
        """
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scopes": list(self.scopes),
            "refresh_token": self.refresh_token,
            ACCESS_TOKEN_KEY: self.access_token,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Credential":
        """
        Create Credential from its on-disk dictionary.

        Args:
            data: Dictionary with the on-disk field names

        Returns:
            Credential instance

        Raises:
            KeyError: If a field is missing
            TypeError: If a field has the wrong type
        """
        for key in ("client_id", "client_secret", "refresh_token", ACCESS_TOKEN_KEY):
            if not isinstance(data[key], str):
                raise TypeError(f"{key} must be a string")

        scopes = data["scopes"]
        if not isinstance(scopes, list) or not all(isinstance(s, str) for s in scopes):
            raise TypeError("scopes must be a list of strings")

        return cls(
            client_id=data["client_id"],
            client_secret=data["client_secret"],
            scopes=list(scopes),
            refresh_token=data["refresh_token"],
            access_token=data[ACCESS_TOKEN_KEY],
        )


class CredentialStore:
    """
    File-based credential storage (plaintext JSON).

    A missing file is not an error: an empty record is written in its place
    so the user has a template to fill in.
    """

    def __init__(self, path: str):
        """
        Initialize credential storage.

        Args:
            path: Path to the credential record (relative paths resolve
                  against the working directory)
        """
        self.path = Path(path)

    def _set_secure_permissions(self) -> None:
        """Set file permissions to user-only read/write (600)."""
        try:
            self.path.chmod(0o600)
            logger.debug(f"Set secure permissions (600) on {self.path}")
        except OSError as e:
            logger.warning(f"Could not set secure permissions: {e}")

    def load(self) -> Credential:
        """
        Load the credential record.

        Returns:
            Credential read from file, or an empty default record (which is
            also written to disk) if the file does not exist

        Raises:
            ConfigurationError: If the file cannot be read or parsed
            TokenStorageError: If the default record cannot be written
        """
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No credential record at {self.path}, creating a default one")
            credential = Credential()
            self.save(credential)
            return credential
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                f"Credential record {self.path} is not valid UTF-8: {e}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Could not read credential record {self.path}: {e}"
            ) from e

        try:
            data = json.loads(contents)
            if not isinstance(data, dict):
                raise TypeError("record must be a JSON object")
            credential = Credential.from_dict(data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Credential record {self.path} is not valid JSON: {e}"
            ) from e
        except KeyError as e:
            raise ConfigurationError(
                f"Credential record {self.path} is missing field {e}"
            ) from e
        except TypeError as e:
            raise ConfigurationError(
                f"Credential record {self.path} is invalid: {e}"
            ) from e

        logger.debug(f"Credential record loaded from {self.path}")
        return credential

    def save(self, credential: Credential) -> None:
        """
        Save the credential record.

        Args:
            credential: Record to write

        Raises:
            TokenStorageError: If the file cannot be written
        """
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(credential.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save credential record: {e}")
            raise TokenStorageError(f"Failed to save credential record: {e}") from e

        self._set_secure_permissions()
        logger.info(f"Credential record saved to {self.path}")

    def exists(self) -> bool:
        """
        Check if the credential record exists.

        Returns:
            True if the record file exists, False otherwise
        """
        return self.path.exists()
