"""
Credential Store
================

Plaintext username/password file used by the login and registration
screens. One "username:password" pair per line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from asteroid_belt.belt_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class RegistrationError(ValueError):
    """Raised when a registration request is rejected."""


class CredentialStore:
    """Reads and appends username:password pairs."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        config: Optional[GameConfig] = None
    ):
        if path is None:
            if config is None:
                config = get_config()
            path = config.storage.credentials_path
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_credentials(self) -> Dict[str, str]:
        """
        Load all credentials.

        Lines without a colon are ignored; the password is everything after
        the first colon. Later duplicates win.

        Returns:
            Mapping of username to password, empty if the file is missing.
        """
        credentials: Dict[str, str] = {}
        if not self._path.exists():
            return credentials

        try:
            with open(self._path, "r") as f:
                for line in f:
                    line = line.strip()
                    if not line or ":" not in line:
                        continue
                    username, password = line.split(":", 1)
                    credentials[username] = password
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Error loading credentials from %s: %s", self._path, e)
        return credentials

    def save_credentials(self, username: str, password: str) -> bool:
        """Append a username/password pair. Returns False if the write fails."""
        try:
            with open(self._path, "a") as f:
                f.write(f"{username}:{password}\n")
        except OSError as e:
            logger.warning("Error saving credentials to %s: %s", self._path, e)
            return False
        return True

    def username_exists(self, username: str) -> bool:
        return username in self.load_credentials()

    def validate_login(self, username: str, password: str) -> bool:
        """True if the username exists and the password matches."""
        stored = self.load_credentials().get(username)
        return stored is not None and stored == password

    def register(self, username: str, password: str, confirm_password: str) -> None:
        """
        Register a new account.

        Args:
            username: Requested username (surrounding whitespace is stripped).
            password: Requested password.
            confirm_password: Must equal password.

        Raises:
            RegistrationError: If a field is empty, the passwords differ,
                the username is taken, or the file cannot be written.
        """
        username = username.strip()
        if not username or not password or not confirm_password:
            raise RegistrationError("Please fill in all fields")
        if ":" in username:
            raise RegistrationError("Username cannot contain ':'")
        if password != confirm_password:
            raise RegistrationError("Passwords do not match")
        if self.username_exists(username):
            raise RegistrationError(
                "Username already exists. Please choose a different username."
            )
        if not self.save_credentials(username, password):
            raise RegistrationError("Failed to save credentials. Please try again.")
        logger.info("Registered user %s", username)
