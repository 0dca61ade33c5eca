"""Command-line interface for the QR login client.

This module provides commands for logging in, checking a scanned QR payload,
approving or rejecting the login request it carries, logging out and showing
the session status.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .app import QRLoginApp, create_app
from .auth import AuthResult
from .config import get_config_manager, setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="qrlogin",
        description="Approve or reject a pending login by its scanned QR payload",
        epilog='Example: qrlogin approve \'{"tempLoginToken": "abcdef"}\'',
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--server-url", help="Base URL of the auth API")
    parser.add_argument("--config-dir", type=Path, help="Directory holding the stored credential")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    login_parser = subparsers.add_parser("login", help="Log in and store the session credential")
    login_parser.add_argument("-u", "--username", help="Account username")
    login_parser.add_argument("-p", "--password", help="Account password")

    scan_parser = subparsers.add_parser("scan", help="Check whether a QR payload may enter the approval flow")
    scan_parser.add_argument("payload", help="Scanned QR payload (JSON object or bare token)")

    approve_parser = subparsers.add_parser("approve", help="Approve the login request carried by a QR payload")
    approve_parser.add_argument("payload", help="Scanned QR payload (JSON object or bare token)")

    reject_parser = subparsers.add_parser("reject", help="Reject the login request carried by a QR payload")
    reject_parser.add_argument("payload", help="Scanned QR payload (JSON object or bare token)")

    subparsers.add_parser("logout", help="Log out and clear the stored credential")
    subparsers.add_parser("status", help="Show whether a session credential is stored")

    return parser


def _report(result: AuthResult) -> int:
    if result.success:
        print(result.data if result.data is not None else result.message)
        return 0

    print(f"Error: {result.message}", file=sys.stderr)
    return 1


async def cmd_login(app: QRLoginApp, args: argparse.Namespace) -> int:
    result = await app.login(args.username, args.password)
    if result.success:
        print(result.message)
        return 0
    return _report(result)


async def cmd_scan(app: QRLoginApp, args: argparse.Namespace) -> int:
    scan_result, _ = app.scan(args.payload)
    if scan_result.success:
        print(f"{scan_result.message}: {scan_result.data}")
        return 0
    return _report(scan_result)


async def cmd_approve(app: QRLoginApp, args: argparse.Namespace) -> int:
    scan_result, approval = app.scan(args.payload)
    if approval is None:
        return _report(scan_result)

    return _report(await approval.approve())


async def cmd_reject(app: QRLoginApp, args: argparse.Namespace) -> int:
    scan_result, approval = app.scan(args.payload)
    if approval is None:
        return _report(scan_result)

    return _report(approval.reject())


async def cmd_logout(app: QRLoginApp, args: argparse.Namespace) -> int:
    return _report(await app.logout())


async def cmd_status(app: QRLoginApp, args: argparse.Namespace) -> int:
    for key, value in app.get_status().items():
        print(f"{key}: {value}")
    return 0


COMMANDS = {
    "login": cmd_login,
    "scan": cmd_scan,
    "approve": cmd_approve,
    "reject": cmd_reject,
    "logout": cmd_logout,
    "status": cmd_status,
}


async def _run(app: QRLoginApp, args: argparse.Namespace) -> int:
    async with app:
        return await COMMANDS[args.command](app, args)


def main(args: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    config = get_config_manager().load_config(server_url=parsed_args.server_url, config_dir=parsed_args.config_dir)
    setup_logging(config)

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    return asyncio.run(_run(create_app(config), parsed_args))


if __name__ == "__main__":
    sys.exit(main())
