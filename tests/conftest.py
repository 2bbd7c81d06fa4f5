"""Shared test fixtures."""

from __future__ import annotations

import base64
from collections.abc import Callable
import json
from typing import Any

import pytest

from betexport.adapters.browser.base import StorageSnapshot

JWT_HEADER = {"alg": "HS256", "typ": "JWT"}
JWT_SIGNATURE = "c2lnbmF0dXJlLXZhbHVl"


def _b64url(data: dict[str, Any]) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


@pytest.fixture
def make_jwt() -> Callable[..., str]:
    """Build a JWT-shaped token whose payload decodes to ``claims``."""

    def _make(**claims: Any) -> str:
        payload = {"sub": "user-1", "iat": 1700000000, **claims}
        return f"{_b64url(JWT_HEADER)}.{_b64url(payload)}.{JWT_SIGNATURE}"

    return _make


@pytest.fixture
def snapshot_of() -> Callable[..., StorageSnapshot]:
    """Build a snapshot from plain dicts, keeping insertion order."""

    def _make(
        local: dict[str, str] | None = None,
        session: dict[str, str] | None = None,
        cookie: str = "",
    ) -> StorageSnapshot:
        return StorageSnapshot(
            local_storage=tuple((local or {}).items()),
            session_storage=tuple((session or {}).items()),
            cookie=cookie,
        )

    return _make
