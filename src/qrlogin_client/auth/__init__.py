"""Auth API client, wire models and correlation ids."""

from .client import AuthClient
from .correlation import CORRELATION_ID_PATTERN, generate_correlation_id
from .models import AuthResult, AuthStatus

__all__ = ["AuthClient", "AuthResult", "AuthStatus", "CORRELATION_ID_PATTERN", "generate_correlation_id"]
