"""Tests for ExportRunLogger output."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from loguru import logger
import pytest

from betexport.services.export_run.logger import ExportRunLogger
from betexport.services.export_run.types import ExportOutcome, ExportResult


@pytest.fixture
def records() -> Iterator[list[dict]]:
    captured: list[dict] = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(sink_id)


class TestExportRunLogger:
    def test_file_written_binds_run_fields(self, records: list[dict]) -> None:
        # setup
        log = ExportRunLogger()
        result = ExportResult(
            outcome=ExportOutcome.SUCCESS,
            row_count=4,
            file_name="out.csv",
            path=Path("exports") / "out.csv",
        )

        # act
        log.file_written("run123", result)

        # assert
        extra = records[0]["extra"]
        assert extra["run_id"] == "run123"
        assert extra["rows"] == 4
        assert extra["path"] == str(Path("exports") / "out.csv")

    def test_run_failed_carries_outcome(self, records: list[dict]) -> None:
        log = ExportRunLogger()
        result = ExportResult(
            outcome=ExportOutcome.REMOTE_ERROR,
            message="Sportsbet responded 503",
            status_code=503,
        )

        log.run_failed("run123", result)

        record = records[0]
        assert record["level"].name == "WARNING"
        assert record["extra"]["outcome"] == "remote_error"
        assert record["extra"]["status_code"] == 503
        assert "Sportsbet responded 503" in record["message"]
