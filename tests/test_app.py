"""Tests for the application facade and the command line."""

import asyncio

from qrlogin_client import QRLoginApp, __version__, create_app
from qrlogin_client.approval import ApprovalState
from qrlogin_client.auth import AuthStatus
from qrlogin_client.cli import create_parser, main
from qrlogin_client.config import ClientConfig
from qrlogin_client.credential import FileCredentialStore, InMemoryCredentialStore


def make_app(server, tmp_path, store=None, **overrides):
    config = ClientConfig(server_url="http://auth.test/api/v1/auth", config_dir=tmp_path, **overrides)
    return QRLoginApp(config, store=store, transport=server.transport)


def test_full_session(server, tmp_path):
    server.reply("/login", json={"token": "tok123"})
    server.reply("/mobile-login", text="Welcome")
    server.reply("/logout", json=True)
    app = make_app(server, tmp_path, username="jitendra", password="password1")

    assert isinstance(app.store, FileCredentialStore)
    assert not app.is_logged_in()

    assert asyncio.run(app.login()).success
    assert app.is_logged_in()
    assert app.get_status()["logged_in"] is True

    scan, approval = app.scan('{"tempLoginToken": "abcdef"}')
    assert scan.success
    assert asyncio.run(approval.approve()).success
    assert approval.state == ApprovalState.APPROVED

    assert asyncio.run(app.logout()).success
    assert not app.is_logged_in()
    assert [request.url.path for request in server.requests] == [
        "/api/v1/auth/login",
        "/api/v1/auth/mobile-login",
        "/api/v1/auth/logout",
    ]


def test_scan_refusal_opens_no_approval(server, tmp_path):
    app = make_app(server, tmp_path, store=InMemoryCredentialStore("tok123"))

    scan, approval = app.scan("xyz")

    assert scan.status == AuthStatus.VALIDATION_ERROR
    assert approval is None


def test_scan_uses_configured_token(server, tmp_path):
    app = make_app(server, tmp_path, expected_temp_token="per-session")

    assert app.scan("per-session")[1] is not None
    assert app.scan("abcdef")[1] is None


def test_login_requires_account(server, tmp_path):
    app = make_app(server, tmp_path)

    result = asyncio.run(app.login())

    assert result.status == AuthStatus.VALIDATION_ERROR
    assert server.requests == []


def test_cli_version():
    assert create_parser().format_usage().startswith("usage: qrlogin")
    assert __version__ == "1.0.0"


def test_cli_without_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: qrlogin" in capsys.readouterr().out


def test_cli_status(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "status"]) == 0
    assert "logged_in: False" in capsys.readouterr().out


def test_cli_approve_refuses_unauthorized_payload(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "approve", "xyz"]) == 1
    assert "not authorized" in capsys.readouterr().err


def test_cli_approve_without_login(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "approve", '{"tempLoginToken": "abcdef"}']) == 1
    assert "No authentication token found" in capsys.readouterr().err


def test_cli_reject(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "reject", "abcdef"]) == 0
    assert "rejected" in capsys.readouterr().out


def test_cli_logout_without_login(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "logout"]) == 1
    assert "No authentication token found" in capsys.readouterr().err


def test_cli_scan_accepts_authorized_payload(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "scan", '{"tempLoginToken": "abcdef"}']) == 0
    assert "QR code accepted: abcdef" in capsys.readouterr().out


def test_cli_scan_refuses_unauthorized_payload(tmp_path, capsys):
    assert main(["--config-dir", str(tmp_path), "scan", "xyz"]) == 1
    assert "not authorized" in capsys.readouterr().err


def test_create_app_uses_file_store(tmp_path):
    app = create_app(ClientConfig(config_dir=tmp_path))

    assert isinstance(app, QRLoginApp)
    assert isinstance(app.store, FileCredentialStore)
    assert app.get_status()["credentials_file"].startswith(str(tmp_path))
    asyncio.run(app.client.aclose())
