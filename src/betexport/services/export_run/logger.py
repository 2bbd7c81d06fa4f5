"""Logging for export runs."""

from __future__ import annotations

import loguru
from loguru import logger

from betexport.services.export_run.types import ExportResult


class ExportRunLogger:
    """Handles all logging for ExportService."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        """Initialize logger.

        Args:
            logger_instance: Logger instance to use (defaults to loguru.logger)
        """
        self._logger = logger_instance

    def run_started(self, run_id: str, from_date: str, to_date: str) -> None:
        """Log the start of an export run."""
        self._logger.bind(run_id=run_id, from_date=from_date, to_date=to_date).info(
            "Export {} started for {} to {}", run_id, from_date, to_date
        )

    def invalid_input(self, run_id: str) -> None:
        """Log a run rejected for missing dates."""
        self._logger.bind(run_id=run_id).warning(
            "Export {} rejected: missing dates", run_id
        )

    def records_fetched(self, run_id: str, count: int) -> None:
        """Log the number of records fetched."""
        self._logger.bind(run_id=run_id, records=count).info(
            "Export {} fetched {} records", run_id, count
        )

    def file_written(self, run_id: str, result: ExportResult) -> None:
        """Log the written CSV file."""
        self._logger.bind(
            run_id=run_id, rows=result.row_count, path=str(result.path)
        ).info("Export {} wrote {} rows to {}", run_id, result.row_count, result.path)

    def run_failed(self, run_id: str, result: ExportResult) -> None:
        """Log a run that ended without a file."""
        self._logger.bind(
            run_id=run_id,
            outcome=result.outcome.value,
            status_code=result.status_code,
        ).warning(
            "Export {} ended with {}: {}",
            run_id,
            result.outcome.value,
            result.message,
        )

    def unexpected_error(self, run_id: str, error: Exception) -> None:
        """Log an unexpected error with its traceback."""
        self._logger.bind(run_id=run_id).exception(
            "Export {} failed unexpectedly: {}", run_id, error
        )
