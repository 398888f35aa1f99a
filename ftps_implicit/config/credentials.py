"""Secure credential storage for the implicit TLS FTP client.

Uses the system keyring (Windows Credential Manager, macOS Keychain,
Linux Secret Service) so FTPS passwords stay out of the settings file.
"""

from typing import Optional

import keyring
from keyring.errors import KeyringError


class CredentialManager:
    """Secure credential storage using system keyring."""

    SERVICE_NAME = "ftps-implicit"

    def _make_key(self, server: str, username: str) -> str:
        """Keyring entry name for a server/username pair."""
        return f"{server}:{username}"

    def save_password(self, server: str, username: str, password: str) -> bool:
        """
        Save FTPS password securely.

        Args:
            server: FTPS server host
            username: FTPS username
            password: Password to save

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            key = self._make_key(server, username)
            keyring.set_password(self.SERVICE_NAME, key, password)
            return True
        except KeyringError:
            return False

    def get_password(self, server: str, username: str) -> Optional[str]:
        """
        Retrieve saved password.

        Args:
            server: FTPS server host
            username: FTPS username

        Returns:
            Password string or None if not found
        """
        try:
            key = self._make_key(server, username)
            return keyring.get_password(self.SERVICE_NAME, key)
        except KeyringError:
            return None

    def delete_password(self, server: str, username: str) -> bool:
        """
        Remove saved password.

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            key = self._make_key(server, username)
            keyring.delete_password(self.SERVICE_NAME, key)
            return True
        except KeyringError:
            return False

    def has_password(self, server: str, username: str) -> bool:
        """True if a password is saved for the pair."""
        return self.get_password(server, username) is not None
