"""QR login client - approve or reject pending logins from a second device."""

__version__ = "1.0.0"

from .app import QRLoginApp, create_app
from .config import get_config_manager

__all__ = ["QRLoginApp", "create_app", "get_config_manager", "__version__"]
