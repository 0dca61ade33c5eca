"""QR login application facade.

This ties together:
- Configuration and the credential store
- The temp login token validator shared by scan and approval
- The auth client and per-scan approval state machines
"""

from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger

from .approval import ApprovalStateMachine
from .auth import AuthClient, AuthResult, AuthStatus
from .config import ClientConfig
from .credential import CredentialStore, FileCredentialStore
from .scan import TempTokenValidator, accept_scan


class QRLoginApp:
    """Session-level entry point used by a UI or the command line."""

    def __init__(
        self,
        config: ClientConfig,
        store: Optional[CredentialStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the application.

        Args:
            config: Client configuration
            store: Credential store (defaults to a file store under config.config_dir)
            transport: Optional httpx transport handed to the auth client
        """
        self.config = config
        self.store = store if store is not None else FileCredentialStore(config.config_dir, key=config.credential_key)
        self.validator = TempTokenValidator(config.expected_temp_token)
        self.client = AuthClient(
            server_url=config.server_url,
            store=self.store,
            validator=self.validator,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

        logger.info(f"Initialized QR login client for server: {config.server_url}")

    async def __aenter__(self) -> QRLoginApp:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def is_logged_in(self) -> bool:
        return self.store.has_credential()

    async def login(self, username: Optional[str] = None, password: Optional[str] = None) -> AuthResult:
        """Log in with the given account, falling back to the configured one."""
        username = username or self.config.username
        password = password or self.config.password
        if not username or not password:
            return AuthResult.fail(AuthStatus.VALIDATION_ERROR, "Username and password are required")

        return await self.client.login(username, password)

    def scan(self, raw_payload: Optional[str]) -> tuple[AuthResult, Optional[ApprovalStateMachine]]:
        """Gate a scanned QR payload and open an approval for it.

        Returns:
            Tuple of (scan result, state machine or None when the scan was refused)
        """
        result = accept_scan(raw_payload, self.validator)
        if not result.success:
            return result, None

        return result, ApprovalStateMachine(result.data, self.client)

    async def logout(self) -> AuthResult:
        return await self.client.logout()

    def get_status(self) -> dict:
        """Get a summary of the client state."""
        status = {
            "server_url": self.config.server_url,
            "logged_in": self.is_logged_in(),
        }
        if isinstance(self.store, FileCredentialStore):
            status["credentials_file"] = str(self.store.credentials_file)
        return status


def create_app(config: Optional[ClientConfig] = None) -> QRLoginApp:
    """Create an application with default settings.

    Args:
        config: Client configuration (loaded from the environment if omitted)

    Returns:
        Configured application
    """
    return QRLoginApp(config if config is not None else ClientConfig())
