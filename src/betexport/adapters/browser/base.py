"""Storage snapshot type and the protocol for sources that produce one."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import re
from typing import Literal, Protocol
from urllib.parse import unquote

StorageSurface = Literal["localStorage", "sessionStorage"]


class StorageBackendError(Exception):
    """Raised when a storage source cannot produce a snapshot."""


@dataclass(frozen=True, slots=True)
class StorageEntry:
    """One key/value pair read from a page storage surface."""

    surface: StorageSurface
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class StorageSnapshot:
    """Read-only copy of a page's client-side storage.

    Entries keep the page's enumeration order, which decides which candidate
    wins when several would match.
    """

    local_storage: tuple[tuple[str, str], ...] = ()
    session_storage: tuple[tuple[str, str], ...] = ()
    cookie: str = ""
    origin: str | None = field(default=None, compare=False)

    def entries(self) -> Iterator[StorageEntry]:
        """Yield local storage entries, then session storage entries."""
        for key, value in self.local_storage:
            yield StorageEntry(surface="localStorage", key=key, value=value)
        for key, value in self.session_storage:
            yield StorageEntry(surface="sessionStorage", key=key, value=value)

    def cookies(self) -> list[tuple[str, str]]:
        """Parse the cookie string into ordered ``(name, decoded value)`` pairs."""
        pairs: list[tuple[str, str]] = []
        for part in self.cookie.split(";"):
            name, sep, value = part.strip().partition("=")
            if not sep or not name or not value:
                continue
            pairs.append((name, unquote(value)))
        return pairs

    def cookie_value(self, *names: str) -> str | None:
        """Return the first cookie whose name matches one of ``names``.

        Matching is case-insensitive and follows cookie-string order.
        """
        wanted = {name.lower() for name in names}
        for name, value in self.cookies():
            if name.lower() in wanted:
                return value
        return None

    def cookie_search(self, name: str) -> str | None:
        """Return the value after the first ``name=`` anywhere in the cookie string.

        Unlike ``cookie_value`` the name is not anchored to a cookie boundary,
        so ``sb-customer-id=...`` matches ``customer-id``.
        """
        match = re.search(re.escape(name) + r"=([^;]+)", self.cookie, re.IGNORECASE)
        return unquote(match[1]) if match else None


class StorageBackend(Protocol):
    """Protocol for sources of an authenticated page's storage.

    Implementations read the site's local storage, session storage and
    cookie string without modifying any of them.
    """

    def read_storage(self) -> StorageSnapshot:
        """Return a snapshot of the page's storage surfaces.

        Raises:
            StorageBackendError: If the source is unavailable.
        """
        ...
