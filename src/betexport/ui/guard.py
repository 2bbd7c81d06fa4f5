from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import threading


class ExportInFlightError(Exception):
    """Another export is already running."""


class SingleFlightGuard:
    """Allows at most one export at a time.

    A second submission while one is running is refused rather than queued.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def claim(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ExportInFlightError("An export is already in progress.")
        try:
            yield
        finally:
            self._lock.release()
