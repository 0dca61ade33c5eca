"""Shared fixtures: a recording fake auth server and an in-memory credential store."""

from __future__ import annotations

import inspect
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from qrlogin_client.auth import AuthClient
from qrlogin_client.credential import InMemoryCredentialStore
from qrlogin_client.scan import TempTokenValidator

BASE_URL = "http://auth.test/api/v1/auth"
EXPECTED_TOKEN = "abcdef"


class FakeAuthServer:
    """Routes requests by path and records every request it receives."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Callable[[httpx.Request], Any]] = {}

    def route(self, path: str, responder: Callable[[httpx.Request], Any]) -> None:
        self.routes[f"/api/v1/auth{path}"] = responder

    def reply(self, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self.route(path, lambda request: httpx.Response(status_code, **kwargs))

    def fail_with(self, path: str, exc_type: type = httpx.ConnectError) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise exc_type("connection refused", request=request)

        self.route(path, responder)

    def body_of(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get(request.url.path)
        if responder is None:
            return httpx.Response(404, json={"message": "Not found"})
        response = responder(request)
        if inspect.isawaitable(response):
            response = await response
        return response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "QRLOGIN_SERVER_URL",
        "QRLOGIN_TIMEOUT_SECONDS",
        "QRLOGIN_EXPECTED_TEMP_TOKEN",
        "QRLOGIN_USERNAME",
        "QRLOGIN_PASSWORD",
        "QRLOGIN_CONFIG_DIR",
        "QRLOGIN_CREDENTIAL_KEY",
        "QRLOGIN_LOG_LEVEL",
        "QRLOGIN_LOG_TO_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def server() -> FakeAuthServer:
    return FakeAuthServer()


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def validator() -> TempTokenValidator:
    return TempTokenValidator(EXPECTED_TOKEN)


@pytest.fixture
def client(server, store, validator) -> AuthClient:
    return AuthClient(BASE_URL, store, validator, timeout_seconds=5.0, transport=server.transport)
