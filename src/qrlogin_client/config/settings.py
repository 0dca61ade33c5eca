"""Configuration management for the QR login client.

This module provides configuration management with environment variable
overrides applied on top of the dataclass defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger


@dataclass
class ClientConfig:
    """Complete QR login client configuration."""

    # Server settings
    server_url: str = "http://localhost:8080/api/v1/auth"
    timeout_seconds: float = 30.0

    # Temp login token accepted at scan time and on approval
    expected_temp_token: str = "abcdef"

    # Account used by the login command
    username: str = ""
    password: str = ""

    # Credential storage
    config_dir: Path = field(default_factory=lambda: Path.home() / ".qrlogin")
    credential_key: str = "jwt_token"

    # Logging
    log_level: str = "INFO"
    log_to_console: bool = True
    log_to_file: bool = False
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"

    def __post_init__(self):
        """Apply environment variable overrides."""
        self._apply_env_overrides()

    @property
    def log_file_path(self) -> Path:
        return self.config_dir / "logs" / "qrlogin.log"

    def _apply_env_overrides(self):
        """Apply configuration overrides from environment variables."""
        if server_url := os.getenv("QRLOGIN_SERVER_URL"):
            self.server_url = server_url

        if timeout := os.getenv("QRLOGIN_TIMEOUT_SECONDS"):
            try:
                self.timeout_seconds = float(timeout)
            except ValueError:
                logger.warning(f"Invalid timeout: {timeout}")

        if expected_temp_token := os.getenv("QRLOGIN_EXPECTED_TEMP_TOKEN"):
            self.expected_temp_token = expected_temp_token

        if username := os.getenv("QRLOGIN_USERNAME"):
            self.username = username

        if password := os.getenv("QRLOGIN_PASSWORD"):
            self.password = password

        if config_dir := os.getenv("QRLOGIN_CONFIG_DIR"):
            self.config_dir = Path(config_dir)

        if credential_key := os.getenv("QRLOGIN_CREDENTIAL_KEY"):
            self.credential_key = credential_key

        if log_level := os.getenv("QRLOGIN_LOG_LEVEL"):
            self.log_level = log_level.upper()

        if log_to_file := os.getenv("QRLOGIN_LOG_TO_FILE"):
            self.log_to_file = log_to_file.lower() in ("1", "true", "yes", "on")

    def validate(self) -> tuple[bool, list[str]]:
        """Validate the configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if not self.server_url:
            errors.append("Server URL is required")

        if self.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        if not self.expected_temp_token:
            errors.append("Expected temp login token is required")

        if not self.credential_key:
            errors.append("Credential key is required")

        return len(errors) == 0, errors


class ConfigManager:
    """Manages QR login client configuration."""

    def __init__(self):
        self._config: Optional[ClientConfig] = None

    def load_config(
        self,
        server_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        config_dir: Optional[Path] = None,
    ) -> ClientConfig:
        """Load configuration with optional overrides.

        Args:
            server_url: Server URL override
            username: Username override
            password: Password override
            config_dir: Credential/log directory override

        Returns:
            Configured ClientConfig instance
        """
        config = ClientConfig()

        # Parameter overrides win over the environment
        if server_url:
            config.server_url = server_url

        if username:
            config.username = username

        if password:
            config.password = password

        if config_dir:
            config.config_dir = Path(config_dir)

        self._config = config
        return config

    def get_config(self) -> Optional[ClientConfig]:
        """Get current configuration."""
        return self._config

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate current configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        if not self._config:
            return False, ["No configuration loaded"]

        return self._config.validate()


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager."""
    return _config_manager
