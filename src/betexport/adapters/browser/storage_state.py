"""Storage snapshot loaded from a JSON file on disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from loguru import logger

from betexport.adapters.browser.base import StorageBackendError, StorageSnapshot


def _host_matches(host: str, site_host: str) -> bool:
    host = host.lstrip(".").lower()
    site_host = site_host.lower()
    return host == site_host or host.endswith("." + site_host)


def _pairs(value: Any) -> tuple[tuple[str, str], ...]:
    """Accept either ``{"k": "v"}`` or ``[{"name": "k", "value": "v"}]``."""
    if isinstance(value, dict):
        return tuple(
            (str(k), v if isinstance(v, str) else json.dumps(v))
            for k, v in value.items()
        )
    if isinstance(value, list):
        return tuple(
            (str(item["name"]), str(item.get("value", "")))
            for item in value
            if isinstance(item, dict) and "name" in item
        )
    return ()


class StorageStateFileBackend:
    """Reads a storage snapshot exported from a logged-in browser.

    Two layouts are understood:

    - Playwright ``storageState`` files (``{"cookies": [...], "origins": [...]}``).
      Only cookies and origins belonging to ``site_host`` are kept; Playwright
      does not persist session storage, so that surface is empty.
    - A plain dump with ``localStorage``, ``sessionStorage`` and ``cookie``
      keys, as produced by ``PlaywrightCDPBackend.dump`` or a devtools snippet.
    """

    def __init__(self, path: Path | str, *, site_host: str) -> None:
        self._path = Path(path).expanduser()
        self._site_host = site_host

    def read_storage(self) -> StorageSnapshot:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise StorageBackendError(
                f"Storage state file not found: {self._path}"
            ) from None
        except (OSError, json.JSONDecodeError) as e:
            raise StorageBackendError(
                f"Failed to read storage state file {self._path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise StorageBackendError(
                f"Storage state file {self._path} must contain a JSON object"
            )

        if "origins" in data or isinstance(data.get("cookies"), list):
            snapshot = self._from_playwright_state(data)
        else:
            snapshot = StorageSnapshot(
                local_storage=_pairs(data.get("localStorage")),
                session_storage=_pairs(data.get("sessionStorage")),
                cookie=str(data.get("cookie") or ""),
                origin=data.get("origin"),
            )

        logger.bind(path=str(self._path)).debug(
            "Loaded storage snapshot: {} local, {} session entries",
            len(snapshot.local_storage),
            len(snapshot.session_storage),
        )
        return snapshot

    def _from_playwright_state(self, data: dict[str, Any]) -> StorageSnapshot:
        cookies = [
            f"{c['name']}={c.get('value', '')}"
            for c in data.get("cookies") or []
            if isinstance(c, dict)
            and "name" in c
            and _host_matches(str(c.get("domain", "")), self._site_host)
        ]

        local_storage: list[tuple[str, str]] = []
        origin: str | None = None
        for entry in data.get("origins") or []:
            if not isinstance(entry, dict):
                continue
            origin_url = str(entry.get("origin", ""))
            if not _host_matches(urlsplit(origin_url).hostname or "", self._site_host):
                continue
            origin = origin or origin_url
            local_storage.extend(_pairs(entry.get("localStorage")))

        return StorageSnapshot(
            local_storage=tuple(local_storage),
            cookie="; ".join(cookies),
            origin=origin,
        )
