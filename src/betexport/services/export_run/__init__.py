from betexport.services.export_run.service import ExportService
from betexport.services.export_run.types import (
    ExportOutcome,
    ExportRequest,
    ExportResult,
)

__all__ = [
    "ExportOutcome",
    "ExportRequest",
    "ExportResult",
    "ExportService",
]
