"""Session credential storage for the QR login client.

This module handles:
- Storing and retrieving the bearer session credential in a local file
- Replacing and removing it atomically
- Ensuring proper file permissions for security
"""

from __future__ import annotations

import json
import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from loguru import logger


class StorageError(Exception):
    """Raised when the persistence layer cannot write or remove the credential."""


class CredentialStore(ABC):
    """Owner of the single session credential.

    ``store`` and ``clear`` raise :class:`StorageError` when the underlying
    layer fails. ``get`` never raises: any read failure is reported as an
    absent credential.
    """

    @abstractmethod
    def store(self, credential: str) -> None:
        """Persist ``credential``, replacing any previous value."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the current credential or None."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the credential. Clearing an empty store succeeds."""

    def has_credential(self) -> bool:
        return self.get() is not None


class InMemoryCredentialStore(CredentialStore):
    """Process-local store, used by tests and short-lived sessions."""

    def __init__(self, credential: Optional[str] = None):
        self._credential = credential

    def store(self, credential: str) -> None:
        self._credential = credential

    def get(self) -> Optional[str]:
        return self._credential

    def clear(self) -> None:
        self._credential = None


class FileCredentialStore(CredentialStore):
    """Credential store backed by a JSON file readable only by its owner."""

    def __init__(self, config_dir: Optional[Path] = None, key: str = "jwt_token"):
        """Initialize credential store.

        Args:
            config_dir: Directory for the credentials file (defaults to ~/.qrlogin)
            key: Name under which the credential is persisted
        """
        if config_dir is None:
            self.config_dir = Path.home() / ".qrlogin"
        else:
            self.config_dir = Path(config_dir)

        self.key = key
        self.credentials_file = self.config_dir / "credentials.json"

    def store(self, credential: str) -> None:
        """Store the session credential.

        Args:
            credential: Bearer credential returned by the server

        Raises:
            StorageError: If the directory or file cannot be written
        """
        try:
            self._ensure_config_dir()

            # Write to a temporary file first
            temp_file = self.credentials_file.with_suffix(".tmp")

            with open(temp_file, "w") as f:
                json.dump({self.key: credential}, f, indent=2)

            # Set secure permissions (owner read/write only)
            os.chmod(temp_file, stat.S_IRUSR | stat.S_IWUSR)

            # Atomically replace the credentials file
            temp_file.replace(self.credentials_file)

        except OSError as e:
            logger.error(f"Failed to store credential: {e}")
            raise StorageError(f"Failed to store credential: {e}") from e

        logger.info("Stored session credential")

    def get(self) -> Optional[str]:
        """Load the stored credential.

        Returns:
            The credential, or None when absent or unreadable
        """
        try:
            if not self.credentials_file.exists():
                logger.debug("No credentials file found")
                return None

            if not self._check_file_permissions():
                logger.warning("Credentials file has insecure permissions")
                return None

            with open(self.credentials_file, "r") as f:
                data = json.load(f)

            credential = data.get(self.key) if isinstance(data, dict) else None
            if not isinstance(credential, str) or not credential:
                logger.debug(f"No credential stored under '{self.key}'")
                return None

            return credential

        except Exception as e:
            logger.error(f"Failed to load credential: {e}")
            return None

    def clear(self) -> None:
        """Remove the stored credential.

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        try:
            self.credentials_file.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove credential: {e}")
            raise StorageError(f"Failed to remove credential: {e}") from e

        logger.info("Removed stored credential")

    def _ensure_config_dir(self) -> None:
        """Ensure config directory exists with proper permissions."""
        self.config_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        os.chmod(self.config_dir, stat.S_IRWXU)  # Owner read/write/execute only

    def _check_file_permissions(self) -> bool:
        """Check if credentials file has secure permissions."""
        try:
            file_stat = self.credentials_file.stat()
            file_mode = stat.filemode(file_stat.st_mode)

            # Readable/writable only by owner
            if file_stat.st_mode & (stat.S_IRGRP | stat.S_IWGRP | stat.S_IROTH | stat.S_IWOTH):
                logger.warning(f"Credentials file has insecure permissions: {file_mode}")
                return False

            return True

        except Exception as e:
            logger.error(f"Failed to check file permissions: {e}")
            return False
