"""Playwright backend reading storage from an already-running browser."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any

from loguru import logger

from betexport.adapters.browser.base import StorageBackendError, StorageSnapshot

# Runs inside the page. Read-only: enumerates both storages by index.
_DUMP_STORAGE_JS = """
() => {
  const dump = (storage) => {
    const out = [];
    if (!storage) return out;
    for (let i = 0; i < storage.length; i += 1) {
      const key = storage.key(i);
      out.push([key, storage.getItem(key) ?? ""]);
    }
    return out;
  };
  return {
    origin: window.location.origin,
    localStorage: dump(window.localStorage),
    sessionStorage: dump(window.sessionStorage),
    cookie: document.cookie || "",
  };
}
"""


class PlaywrightCDPBackend:
    """Attaches to a Chromium started with ``--remote-debugging-port``.

    The user signs in as usual in that browser; this backend only reads the
    signed-in tab's storage. It never navigates, reloads or closes pages.
    """

    def __init__(self, cdp_url: str, *, site_host: str) -> None:
        """Initialize the backend.

        Args:
            cdp_url: DevTools endpoint, e.g. ``http://localhost:9222``.
            site_host: Host the signed-in tab must be on.
        """
        self._cdp_url = cdp_url
        self._site_host = site_host

    def read_storage(self) -> StorageSnapshot:
        raw = self._evaluate_in_site_tab()
        return StorageSnapshot(
            local_storage=tuple((str(k), str(v)) for k, v in raw["localStorage"]),
            session_storage=tuple(
                (str(k), str(v)) for k, v in raw["sessionStorage"]
            ),
            cookie=str(raw.get("cookie") or ""),
            origin=raw.get("origin"),
        )

    def dump(self, path: Path | str) -> Path:
        """Write the current snapshot to ``path`` in the plain dump layout."""
        raw = self._evaluate_in_site_tab()
        out = Path(path).expanduser()
        out.write_text(
            json.dumps(
                {
                    "origin": raw.get("origin"),
                    "localStorage": dict(raw["localStorage"]),
                    "sessionStorage": dict(raw["sessionStorage"]),
                    "cookie": raw.get("cookie") or "",
                },
                ensure_ascii=False,
                indent=2,
            ),
            encoding="utf-8",
        )
        return out

    def _evaluate_in_site_tab(self) -> dict[str, Any]:
        try:
            sync_api = importlib.import_module("playwright.sync_api")
        except ImportError as e:
            raise ImportError(
                "Playwright is not installed. Install with: "
                "pip install 'betexport[browser]'"
            ) from e

        with sync_api.sync_playwright() as pw:
            try:
                browser = pw.chromium.connect_over_cdp(self._cdp_url)
            except Exception as e:
                raise StorageBackendError(
                    f"Could not attach to browser at {self._cdp_url}: {e}"
                ) from e

            try:
                page = self._find_site_page(browser)
                logger.bind(url=page.url).debug("Reading storage from open tab")
                result: dict[str, Any] = page.evaluate(_DUMP_STORAGE_JS)
                return result
            finally:
                # Disconnects only; the user's browser keeps running.
                browser.close()

    def _find_site_page(self, browser: Any) -> Any:
        for context in browser.contexts:
            for page in context.pages:
                if self._site_host in (page.url or "").lower():
                    return page
        raise StorageBackendError(
            f"Active tab must already be on {self._site_host} while you're logged in."
        )
