"""Export run orchestration: locate credentials, fetch, write CSV."""

from __future__ import annotations

from pathlib import Path
import uuid

from betexport.adapters.browser.base import StorageBackend, StorageSnapshot
from betexport.adapters.clients.sportsbet import (
    DateRange,
    SportsbetApiError,
    SportsbetClient,
)
from betexport.core.config import ExportConfig
from betexport.services.credentials.locator import (
    AccountNotFoundError,
    CredentialLocator,
    CredentialNotFoundError,
)
from betexport.services.export.csv_writer import EmptyResultError, to_csv
from betexport.services.export_run.logger import ExportRunLogger
from betexport.services.export_run.types import (
    INVALID_INPUT_MESSAGE,
    ExportOutcome,
    ExportRequest,
    ExportResult,
)


class ExportService:
    """Runs one export from a storage source to a CSV file on disk.

    Every failure comes back as an ``ExportResult``; nothing is raised to
    the caller. The file is written only after all pages were fetched and
    at least one row was produced.
    """

    def __init__(
        self,
        *,
        config: ExportConfig,
        storage: StorageBackend,
        locator: CredentialLocator | None = None,
        client: SportsbetClient | None = None,
        log: ExportRunLogger | None = None,
    ) -> None:
        self._config = config
        self._storage = storage
        self._locator = locator or CredentialLocator()
        self._client = client
        self._log = log or ExportRunLogger()

    def run(
        self, request: ExportRequest, output_dir: Path | None = None
    ) -> ExportResult:
        run_id = uuid.uuid4().hex[:12]

        if not request.is_complete():
            self._log.invalid_input(run_id)
            return ExportResult(
                outcome=ExportOutcome.INVALID_INPUT, message=INVALID_INPUT_MESSAGE
            )

        # is_complete() guarantees all four are set
        display_from = str(request.display_from)
        display_to = str(request.display_to)
        date_range = DateRange(
            from_date=str(request.from_date), to_date=str(request.to_date)
        )
        self._log.run_started(run_id, date_range.from_date, date_range.to_date)

        result = self._run_inner(
            run_id,
            date_range,
            display_from,
            display_to,
            output_dir or self._config.output_dir,
        )
        if result.success:
            self._log.file_written(run_id, result)
        else:
            self._log.run_failed(run_id, result)
        return result

    def _run_inner(
        self,
        run_id: str,
        date_range: DateRange,
        display_from: str,
        display_to: str,
        output_dir: Path,
    ) -> ExportResult:
        try:
            snapshot = self._storage.read_storage()
            credential = self._locator.locate(snapshot)
            client = self._resolve_client(snapshot)
            records = client.fetch_all_transactions(credential, date_range)
            self._log.records_fetched(run_id, len(records))
            export = to_csv(records, display_from, display_to, tz=self._config.zone)
            path = export.write_to(output_dir)
        except CredentialNotFoundError as e:
            return ExportResult(
                outcome=ExportOutcome.CREDENTIAL_NOT_FOUND, message=str(e)
            )
        except AccountNotFoundError as e:
            return ExportResult(outcome=ExportOutcome.ACCOUNT_NOT_FOUND, message=str(e))
        except SportsbetApiError as e:
            return ExportResult(
                outcome=ExportOutcome.REMOTE_ERROR,
                message=str(e),
                status_code=e.status_code,
            )
        except EmptyResultError as e:
            return ExportResult(outcome=ExportOutcome.EMPTY, message=str(e))
        except Exception as e:
            self._log.unexpected_error(run_id, e)
            return ExportResult(
                outcome=ExportOutcome.UNEXPECTED_ERROR,
                message=str(e) or "Unexpected error.",
            )

        return ExportResult(
            outcome=ExportOutcome.SUCCESS,
            row_count=export.row_count,
            file_name=export.file_name,
            path=path,
        )

    def _resolve_client(self, snapshot: StorageSnapshot) -> SportsbetClient:
        if self._client is not None:
            return self._client
        return SportsbetClient(
            api_url=self._config.api_url,
            page_size=self._config.page_size,
            timeout_seconds=self._config.timeout_seconds,
            max_pages=self._config.max_pages,
            display_tz=self._config.zone,
            cookie_header=snapshot.cookie or None,
        )
