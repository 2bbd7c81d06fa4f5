"""Tests for the single-flight export guard."""

from __future__ import annotations

import pytest

from betexport.ui.guard import ExportInFlightError, SingleFlightGuard


class TestSingleFlightGuard:
    def test_second_claim_refused_while_first_runs(self) -> None:
        guard = SingleFlightGuard()

        with guard.claim():
            assert guard.in_flight
            with pytest.raises(ExportInFlightError):
                with guard.claim():
                    pass

        assert not guard.in_flight

    def test_released_after_error(self) -> None:
        guard = SingleFlightGuard()

        with pytest.raises(RuntimeError):
            with guard.claim():
                raise RuntimeError("boom")

        with guard.claim():
            assert guard.in_flight
