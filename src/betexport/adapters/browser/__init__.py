"""Sources of a signed-in page's client-side storage."""

from betexport.adapters.browser.base import (
    StorageBackend,
    StorageBackendError,
    StorageEntry,
    StorageSnapshot,
)
from betexport.adapters.browser.storage_state import StorageStateFileBackend

__all__ = [
    "StorageBackend",
    "StorageBackendError",
    "StorageEntry",
    "StorageSnapshot",
    "StorageStateFileBackend",
]

# The Playwright backend imports playwright lazily. Import directly:
#   from betexport.adapters.browser.playwright_cdp import PlaywrightCDPBackend
