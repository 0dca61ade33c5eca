"""Auth client for the QR login server.

This module wraps the three remote operations of the approval flow:
- Logging in and storing the returned session credential
- Approving a pending login identified by a scanned temp login token
- Logging out and clearing the credential once the server confirms it

Every operation returns an :class:`AuthResult`; transport, server and storage
failures are reported through its status instead of being raised.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..credential import CredentialStore, StorageError
from ..scan.validator import TempTokenValidator
from .correlation import generate_correlation_id
from .models import AuthResult, AuthStatus, ErrorBody, LoginRequest, LoginResponse, MobileLoginRequest

USER_AGENT = "QRLogin-Client/1.0.0"

NETWORK_ERROR_MESSAGE = "Network error. Please try again."
NO_CREDENTIAL_MESSAGE = "No authentication token found"
INVALID_TOKEN_MESSAGE = "Invalid QR code. This code is not authorized for login approval."
UNSENDABLE_CREDENTIAL_MESSAGE = "Stored authentication token cannot be sent"

# Everything a request may raise before or while it is on the wire
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError, asyncio.TimeoutError)

ModelT = TypeVar("ModelT", bound=BaseModel)


class AuthClient:
    """Client for the login, mobile-login and logout endpoints."""

    def __init__(
        self,
        server_url: str,
        store: CredentialStore,
        validator: TempTokenValidator,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize auth client.

        Args:
            server_url: Base URL of the auth API, sub-paths are appended to it
            store: Owner of the session credential
            validator: Temp login token rule shared with the scan gate
            timeout_seconds: Upper bound for each request, including the body read
            transport: Optional httpx transport, used to substitute the network in tests
        """
        self.server_url = server_url.rstrip("/")
        self.store = store
        self.validator = validator
        self.timeout_seconds = timeout_seconds
        self.login_endpoint = "/login"
        self.mobile_login_endpoint = "/mobile-login"
        self.logout_endpoint = "/logout"
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds), transport=transport)

    async def __aenter__(self) -> AuthClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def login(self, username: str, password: str) -> AuthResult:
        """Log in and store the returned session credential.

        Returns:
            Success with the credential in ``data``, or a typed failure
        """
        logger.info(f"Logging in as {username}")
        payload = LoginRequest(username=username, password=password).model_dump()

        try:
            response = await self._post(self.login_endpoint, json.dumps(payload))
        except REQUEST_ERRORS as e:
            return self._request_failure("Login", e)

        body = self._parse_model(LoginResponse, self._parse_json(response))

        if response.is_success and body is not None and body.token:
            try:
                self.store.store(body.token)
            except StorageError as e:
                return AuthResult.fail(AuthStatus.STORAGE_ERROR, str(e))

            logger.info("Login successful")
            return AuthResult.ok(message="Login successful", data=body.token)

        message = (body.message if body is not None else None) or "Login failed"
        logger.warning(f"Login failed with HTTP {response.status_code}: {message}")
        return AuthResult.fail(AuthStatus.SERVER_ERROR, message)

    async def approve(self, temp_login_token: Optional[str]) -> AuthResult:
        """Approve the pending login identified by ``temp_login_token``.

        The token is checked again here with the validator used at scan time,
        and nothing is sent when it fails or no credential is stored.

        Returns:
            Success with the raw response text in ``data``, or a typed failure
        """
        if not self.validator.validate(temp_login_token):
            logger.warning("Refusing to approve with an unauthorized temp login token")
            return AuthResult.fail(AuthStatus.VALIDATION_ERROR, INVALID_TOKEN_MESSAGE)

        credential = self.store.get()
        if not credential:
            logger.warning("Cannot approve login: no stored credential")
            return AuthResult.fail(AuthStatus.AUTH_ERROR, NO_CREDENTIAL_MESSAGE)

        payload = MobileLoginRequest(temp_login_token=temp_login_token).model_dump(by_alias=True)

        try:
            response = await self._post(self.mobile_login_endpoint, json.dumps(payload), credential)
        except REQUEST_ERRORS as e:
            return self._request_failure("Mobile login", e)

        if response.is_success:
            logger.info("Login request approved")
            return AuthResult.ok(message="Login approved", data=response.text)

        error = self._parse_model(ErrorBody, self._parse_json(response))
        message = (error.message if error is not None else None) or "Mobile login failed"
        logger.warning(f"Mobile login failed with HTTP {response.status_code}: {message}")
        return AuthResult.fail(AuthStatus.SERVER_ERROR, message)

    async def logout(self) -> AuthResult:
        """Log out; the credential is cleared only when the server answers ``true``."""
        credential = self.store.get()
        if not credential:
            logger.warning("Cannot log out: no stored credential")
            return AuthResult.fail(AuthStatus.AUTH_ERROR, NO_CREDENTIAL_MESSAGE)

        try:
            response = await self._post(self.logout_endpoint, "{}", credential)
        except REQUEST_ERRORS as e:
            return self._request_failure("Logout", e)

        if not response.is_success:
            logger.warning(f"Logout failed with HTTP {response.status_code}")
            return AuthResult.fail(AuthStatus.SERVER_ERROR, "Logout failed")

        if self._parse_json(response) is not True:
            logger.warning("Logout not confirmed by server")
            return AuthResult.fail(AuthStatus.SERVER_ERROR, "Logout failed")

        try:
            self.store.clear()
        except StorageError as e:
            return AuthResult.fail(AuthStatus.STORAGE_ERROR, str(e))

        logger.info("Logged out")
        return AuthResult.ok(message="Logged out")

    async def _post(self, endpoint: str, content: str, credential: Optional[str] = None) -> httpx.Response:
        """Send one POST request, bounded by ``timeout_seconds`` overall.

        Raises:
            httpx.HTTPError: On transport failure
            httpx.InvalidURL: When the server URL cannot be parsed
            UnicodeEncodeError: When the credential cannot be sent as a header value
            asyncio.TimeoutError: When the overall bound expires; the request is cancelled
        """
        headers: Dict[str, str] = {
            "accept": "*/*",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "X-Correlation-ID": generate_correlation_id(),
        }
        if credential is not None:
            headers["Authorization"] = f"Bearer {credential}"

        url = f"{self.server_url}{endpoint}"
        logger.debug(f"POST {url} ({headers['X-Correlation-ID']})")

        return await asyncio.wait_for(
            self._http.post(url, content=content.encode("utf-8"), headers=headers),
            timeout=self.timeout_seconds,
        )

    @staticmethod
    def _request_failure(operation: str, error: Exception) -> AuthResult:
        """Map an exception raised by ``_post`` to a typed failure."""
        if isinstance(error, UnicodeEncodeError):
            # Header values are ASCII only
            logger.error(f"{operation} error: credential is not ASCII encodable")
            return AuthResult.fail(AuthStatus.AUTH_ERROR, UNSENDABLE_CREDENTIAL_MESSAGE)

        if isinstance(error, httpx.InvalidURL):
            logger.error(f"{operation} error: invalid server URL: {error}")
            return AuthResult.fail(AuthStatus.NETWORK_ERROR, f"Invalid server URL: {error}")

        logger.error(f"{operation} error: {error!r}")
        return AuthResult.fail(AuthStatus.NETWORK_ERROR, NETWORK_ERROR_MESSAGE)

    @staticmethod
    def _parse_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _parse_model(model: Type[ModelT], data: Any) -> Optional[ModelT]:
        if not isinstance(data, dict):
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Unexpected {model.__name__} body: {e}")
            return None
