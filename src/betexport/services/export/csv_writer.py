"""Serialize normalized rows into the downloadable CSV artifact."""

from __future__ import annotations

from collections.abc import Sequence
import csv
from dataclasses import dataclass
from datetime import UTC, tzinfo
import io
from pathlib import Path

from betexport.core.records import TransactionRecord
from betexport.services.export.rows import CsvRow

FILE_PREFIX = "sportsbet-transactions"
EMPTY_RESULT_MESSAGE = "No transactions found for that date range."


class EmptyResultError(Exception):
    """The date range produced no transactions; nothing to write."""

    def __init__(self, message: str = EMPTY_RESULT_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class CsvExport:
    """Finished CSV artifact, not yet written anywhere."""

    content: bytes
    file_name: str
    row_count: int

    def write_to(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.file_name
        path.write_bytes(self.content)
        return path


def export_file_name(display_from: str, display_to: str) -> str:
    """``sportsbet-transactions-01-02-24-to-31-03-24.csv`` for the display dates."""
    start = display_from.replace("/", "-")
    end = display_to.replace("/", "-")
    return f"{FILE_PREFIX}-{start}-to-{end}.csv"


def render_csv(rows: Sequence[CsvRow]) -> str:
    """Every field quoted, quotes doubled, embedded newlines kept as-is."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CsvRow.columns())
    for row in rows:
        writer.writerow(row.values())
    return buffer.getvalue()


def to_csv(
    records: Sequence[TransactionRecord],
    display_from: str,
    display_to: str,
    *,
    tz: tzinfo = UTC,
) -> CsvExport:
    """Build the CSV artifact for ``records``.

    Raises:
        EmptyResultError: If ``records`` is empty.
    """
    if not records:
        raise EmptyResultError()
    rows = [CsvRow.from_record(record, tz) for record in records]
    return CsvExport(
        content=render_csv(rows).encode("utf-8"),
        file_name=export_file_name(display_from, display_to),
        row_count=len(rows),
    )
