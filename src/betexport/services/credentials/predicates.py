"""Candidate predicates and the nested-value walk used by the locator.

Each predicate looks at one ``(key, value)`` pair and returns a normalized
candidate string or None. They hold no state, so each can be tested alone.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
import json
import math
import re
from typing import Any

from loguru import logger

from betexport.services.credentials.jwt import decode_jwt_payload, is_likely_jwt

Predicate = Callable[[str | None, Any], str | None]

KNOWN_TOKEN_KEYS = frozenset(
    {
        "accesstoken",
        "accesstokenv2",
        "accesstoken_v2",
        "accesstoken2",
        "accesstokenlatest",
        "accesstokenlegacy",
        "accesstokenprod",
        "cxp-token",
        "cxptoken",
        "cxpaccesstoken",
    }
)
TOKEN_HINT_MIN_LENGTH = 60
CUSTOMER_ID_MIN_DIGITS = 4
CUSTOMER_ID_MAX_DIGITS = 9
MAX_VISITED_NODES = 10_000

_NON_DIGITS_RE = re.compile(r"\D+")
_ALL_DIGITS_RE = re.compile(r"^\d+$")

# ---------------------------------------------------------------------------
# Access token
# ---------------------------------------------------------------------------


def token_candidate(key: str | None, value: Any) -> str | None:
    """Accept a JWT-shaped string, or a long dotted string under a "token" key."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if is_likely_jwt(trimmed):
        return trimmed
    if (
        key
        and "token" in key.lower()
        and "." in trimmed
        and len(trimmed) > TOKEN_HINT_MIN_LENGTH
    ):
        return trimmed
    return None


def known_key_token(key: str | None, value: Any) -> str | None:
    """Accept a JWT-shaped value stored under one of the site's token keys."""
    if not key or key.lower() not in KNOWN_TOKEN_KEYS or not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if is_likely_jwt(trimmed) else None


# ---------------------------------------------------------------------------
# Customer id
# ---------------------------------------------------------------------------


def normalize_customer_id(candidate: str) -> str | None:
    """Strip non-digits; keep the result only when it has 4-9 digits."""
    digits = _NON_DIGITS_RE.sub("", candidate)
    if CUSTOMER_ID_MIN_DIGITS <= len(digits) <= CUSTOMER_ID_MAX_DIGITS:
        return digits
    return None


def customer_candidate(key: str | None, value: Any) -> str | None:
    if isinstance(value, str):
        normalized = normalize_customer_id(value.strip())
        if normalized:
            return normalized
    if (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    ):
        normalized = normalize_customer_id(str(math.floor(value + 0.5)))
        if normalized:
            return normalized
    if key and "customer" in key.lower() and isinstance(value, str) and value:
        return normalize_customer_id(value)
    return None


def customer_id_from_claims(token: str) -> str | None:
    """Read ``custId`` (else ``accountNo``) from the token payload if all digits."""
    claims = decode_jwt_payload(token)
    if not claims:
        return None
    derived = claims.get("custId") or claims.get("accountNo")
    if isinstance(derived, bool) or derived is None:
        return None
    text = str(derived)
    return text if _ALL_DIGITS_RE.match(text) else None


# ---------------------------------------------------------------------------
# Nested values
# ---------------------------------------------------------------------------


def _members(node: dict[str, Any] | list[Any]) -> Iterator[tuple[str, Any]]:
    if isinstance(node, dict):
        yield from ((str(k), v) for k, v in node.items())
    else:
        yield from ((str(i), v) for i, v in enumerate(node))


def walk_members(
    root: Any, *, max_nodes: int = MAX_VISITED_NODES
) -> Iterator[tuple[str, Any]]:
    """Yield every nested ``(key, value)`` pair, depth-first in document order.

    A member is yielded before its own children. List members are keyed by
    their index. Containers already visited are not entered twice, and the
    walk stops after ``max_nodes`` members.
    """
    if not isinstance(root, dict | list):
        return
    seen = {id(root)}
    stack = [_members(root)]
    visited = 0
    while stack:
        member = next(stack[-1], None)
        if member is None:
            stack.pop()
            continue
        visited += 1
        if visited > max_nodes:
            logger.bind(max_nodes=max_nodes).warning(
                "Stopped nested storage walk after {} members", max_nodes
            )
            return
        yield member
        value = member[1]
        if isinstance(value, dict | list) and id(value) not in seen:
            seen.add(id(value))
            stack.append(_members(value))


def search_nested(root: Any, predicate: Predicate) -> str | None:
    """Return the first predicate hit among ``root``'s nested members."""
    for key, value in walk_members(root):
        hit = predicate(key, value)
        if hit:
            return hit
    return None


def parse_structured(raw: str) -> Any:
    """Parse a storage value as JSON, returning None when it is not JSON."""
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return None
