"""Correlation id generation for outbound requests."""

from __future__ import annotations

import re
import uuid

# 8-4-4-4-12 hex layout, version nibble 4, variant nibble 8..b
CORRELATION_ID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def generate_correlation_id() -> str:
    """Return a fresh random id for the ``X-Correlation-ID`` header."""
    return str(uuid.uuid4())
