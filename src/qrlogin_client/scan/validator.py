"""Temp login token validation."""

from __future__ import annotations

import hmac
from typing import Optional


class TempTokenValidator:
    """Checks a scanned temp login token against the configured expected value.

    The same instance is shared by the scan gate and the auth client so both
    call sites apply one rule. The expected value is a static shared secret:
    it is not bound to a particular login attempt and never expires.
    """

    def __init__(self, expected_token: str):
        if not expected_token:
            raise ValueError("expected_token must be a non-empty string")
        self._expected_token = expected_token

    def validate(self, token: Optional[str]) -> bool:
        if not isinstance(token, str) or not token:
            return False
        return hmac.compare_digest(token.encode("utf-8"), self._expected_token.encode("utf-8"))

    __call__ = validate
