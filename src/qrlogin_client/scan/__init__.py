"""QR scan gate: token extraction and validation."""

from .payload import NO_TOKEN_MESSAGE, NOT_AUTHORIZED_MESSAGE, accept_scan, extract_temp_token
from .validator import TempTokenValidator

__all__ = ["TempTokenValidator", "accept_scan", "extract_temp_token", "NO_TOKEN_MESSAGE", "NOT_AUTHORIZED_MESSAGE"]
