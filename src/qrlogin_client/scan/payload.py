"""Extraction of the temp login token from a scanned QR payload.

A QR code carries either a JSON object with a ``tempLoginToken`` field or a
bare string that is used verbatim as the token.
"""

from __future__ import annotations

import json
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from ..auth.models import AuthResult, AuthStatus, QRPayload
from .validator import TempTokenValidator

NO_TOKEN_MESSAGE = "No tempLoginToken found in QR code"
NOT_AUTHORIZED_MESSAGE = "This QR code is not authorized for login approval. Please scan a valid QR code."


def extract_temp_token(raw: Optional[str]) -> Optional[str]:
    """Return the temp login token carried by ``raw``, or None."""
    if not raw:
        return None

    try:
        data = json.loads(raw)
    except ValueError:
        # Not JSON, use the raw string verbatim
        return raw

    if not isinstance(data, dict):
        # Valid JSON that is not an object has no tempLoginToken field
        return None

    try:
        payload = QRPayload.model_validate(data)
    except ValidationError as e:
        logger.debug(f"QR payload has an unusable tempLoginToken: {e}")
        return None

    return payload.temp_login_token or None


def accept_scan(raw: Optional[str], validator: TempTokenValidator) -> AuthResult:
    """Gate a scanned payload before it may enter the approval flow.

    Returns:
        Success carrying the token in ``data``, or a validation error
    """
    token = extract_temp_token(raw)
    if token is None:
        logger.warning("Scanned QR code carries no temp login token")
        return AuthResult.fail(AuthStatus.VALIDATION_ERROR, NO_TOKEN_MESSAGE)

    if not validator.validate(token):
        logger.warning("Scanned QR code is not authorized for login approval")
        return AuthResult.fail(AuthStatus.VALIDATION_ERROR, NOT_AUTHORIZED_MESSAGE)

    logger.info("Accepted scanned temp login token")
    return AuthResult.ok(message="QR code accepted", data=token)
