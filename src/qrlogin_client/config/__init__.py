"""Configuration module for the QR login client."""

from .logger_config import setup_logging
from .settings import ClientConfig, ConfigManager, get_config_manager

__all__ = ["ClientConfig", "ConfigManager", "get_config_manager", "setup_logging"]
