"""Structural JWT checks. Nothing here verifies a signature."""

from __future__ import annotations

import base64
import json
import re
from typing import Any

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")
MIN_SEGMENT_LENGTH = 10


def is_likely_jwt(value: Any) -> bool:
    """Return True for three dot-separated base64url segments of 10+ chars each."""
    if not isinstance(value, str):
        return False
    parts = value.strip().split(".")
    if len(parts) != 3:
        return False
    return all(
        len(part) >= MIN_SEGMENT_LENGTH and _SEGMENT_RE.match(part) for part in parts
    )


def decode_jwt_payload(token: str) -> dict[str, Any] | None:
    """Decode the middle segment of a JWT-shaped token as JSON.

    Returns None when the token is not JWT-shaped or the payload is not a
    JSON object.
    """
    if not is_likely_jwt(token):
        return None
    payload = token.strip().split(".")[1]
    padded = payload + "=" * (-len(payload) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except ValueError:
        return None
    return decoded if isinstance(decoded, dict) else None
