"""Row normalization and CSV serialization."""

from betexport.services.export.csv_writer import (
    CsvExport,
    EmptyResultError,
    export_file_name,
    render_csv,
    to_csv,
)
from betexport.services.export.rows import CsvRow

__all__ = [
    "CsvExport",
    "CsvRow",
    "EmptyResultError",
    "export_file_name",
    "render_csv",
    "to_csv",
]
