"""Request and result types for one export run."""

from __future__ import annotations

from dataclasses import dataclass
import enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

INVALID_INPUT_MESSAGE = "Invalid dates provided."


class ExportOutcome(enum.Enum):
    """How an export run ended."""

    SUCCESS = "success"
    EMPTY = "empty"
    INVALID_INPUT = "invalid_input"
    CREDENTIAL_NOT_FOUND = "credential_not_found"
    ACCOUNT_NOT_FOUND = "account_not_found"
    REMOTE_ERROR = "remote_error"
    UNEXPECTED_ERROR = "unexpected_error"


class ExportRequest(BaseModel):
    """The four date strings the host hands to the core.

    Display dates are ``dd/mm/yy``; API dates are ``dd/mm/yyyy``. The host
    validates them; the core only checks that none is missing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    display_from: str | None = Field(default=None, alias="displayFrom")
    display_to: str | None = Field(default=None, alias="displayTo")
    from_date: str | None = Field(default=None, alias="fromDate")
    to_date: str | None = Field(default=None, alias="toDate")

    def is_complete(self) -> bool:
        return all(
            value and value.strip()
            for value in (
                self.display_from,
                self.display_to,
                self.from_date,
                self.to_date,
            )
        )


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Outcome of a run. ``path`` is set only when a file was written."""

    outcome: ExportOutcome
    message: str = ""
    row_count: int = 0
    file_name: str | None = None
    path: Path | None = None
    status_code: int | None = None

    @property
    def success(self) -> bool:
        return self.outcome is ExportOutcome.SUCCESS

    def to_host_payload(self) -> dict[str, Any]:
        """Shape returned across the host boundary."""
        if self.success:
            return {
                "success": True,
                "rowCount": self.row_count,
                "fileName": self.file_name,
            }
        return {"success": False, "message": self.message}
