"""Loguru sinks for the qrlogin command and embedding applications."""

import sys

from loguru import logger

from .settings import ClientConfig


def setup_logging(config: ClientConfig) -> None:
    """Route client logs to stderr and, when enabled, to a file under config_dir.

    stdout is left to command output so approval responses can be piped.
    Credentials never reach a sink: the auth client only logs their presence.
    """
    logger.remove()

    if config.log_to_console:
        logger.add(
            sink=sys.stderr,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
            level=config.log_level,
            colorize=True,
        )

    if config.log_to_file:
        # Keeps an audit trail of login, approval and logout attempts
        logger.add(
            sink=str(config.log_file_path),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=config.log_level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="gz",
        )
        logger.debug(f"Audit log at {config.log_file_path}")
