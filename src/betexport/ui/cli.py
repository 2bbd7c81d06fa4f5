from __future__ import annotations

from pathlib import Path
import sys

from dotenv import load_dotenv
from loguru import logger
import typer

from betexport.adapters.browser.base import StorageBackend, StorageBackendError
from betexport.adapters.browser.storage_state import StorageStateFileBackend
from betexport.core.config import ExportConfig, load_export_config_from_env
from betexport.services.credentials.locator import (
    find_access_token,
    find_customer_id,
)
from betexport.services.credentials.types import mask_token
from betexport.services.export_run.service import ExportService
from betexport.services.export_run.types import ExportRequest
from betexport.ui.dates import (
    date_from_normalized,
    is_range_within_limit,
    normalize_date_input,
    to_api_date,
)
from betexport.ui.guard import ExportInFlightError, SingleFlightGuard

# Load environment variables from .env
load_dotenv()

app = typer.Typer(
    help="Download your Sportsbet transaction history as CSV.",
    no_args_is_help=True,
)

_guard = SingleFlightGuard()


def _load_config() -> ExportConfig:
    try:
        config = load_export_config_from_env()
    except ValueError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2) from None
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    return config


def _storage_backend(
    config: ExportConfig, storage_state: Path | None, cdp_url: str | None
) -> StorageBackend:
    if storage_state is not None and cdp_url is not None:
        typer.echo("Use either --storage-state or --cdp-url, not both.", err=True)
        raise typer.Exit(2)
    if cdp_url is not None:
        from betexport.adapters.browser.playwright_cdp import PlaywrightCDPBackend

        return PlaywrightCDPBackend(cdp_url, site_host=config.site_host)
    if storage_state is not None:
        return StorageStateFileBackend(storage_state, site_host=config.site_host)
    typer.echo("Provide --storage-state FILE or --cdp-url URL.", err=True)
    raise typer.Exit(2)


def build_request(raw_from: str, raw_to: str) -> ExportRequest:
    """Validate the two user dates and build the core's request.

    Raises:
        typer.BadParameter: With the message shown to the user.
    """
    normalized_from = normalize_date_input(raw_from.strip())
    normalized_to = normalize_date_input(raw_to.strip())
    if not normalized_from or not normalized_to:
        raise typer.BadParameter("Select valid From/To dates before downloading.")

    from_date = to_api_date(normalized_from)
    to_date = to_api_date(normalized_to)
    if (
        not from_date
        or not to_date
        or date_from_normalized(normalized_from) is None
        or date_from_normalized(normalized_to) is None
    ):
        raise typer.BadParameter("Something went wrong parsing your dates.")

    if not is_range_within_limit(normalized_from, normalized_to):
        raise typer.BadParameter(
            "Downloads limited to 24 months at a time. Try a smaller range."
        )

    return ExportRequest(
        display_from=normalized_from,
        display_to=normalized_to,
        from_date=from_date,
        to_date=to_date,
    )


@app.command("export")
def export_cmd(
    from_: str = typer.Option(
        ..., "--from", help="Start date, DD/MM/YY or YYYY-MM-DD"
    ),
    to: str = typer.Option(..., "--to", help="End date, DD/MM/YY or YYYY-MM-DD"),
    storage_state: Path | None = typer.Option(
        None,
        "--storage-state",
        envvar="BETEXPORT_STORAGE_STATE",
        help="JSON storage snapshot of a signed-in browser",
    ),
    cdp_url: str | None = typer.Option(
        None,
        "--cdp-url",
        envvar="BETEXPORT_CDP_URL",
        help="DevTools URL of a running, signed-in Chromium",
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", help="Directory for the CSV file"
    ),
) -> None:
    """Export transactions between two dates to a CSV file."""
    config = _load_config()
    request = build_request(from_, to)
    storage = _storage_backend(config, storage_state, cdp_url)

    try:
        with _guard.claim():
            typer.echo("Downloading… large ranges can take a while.")
            result = ExportService(config=config, storage=storage).run(
                request, output_dir=output_dir
            )
    except ExportInFlightError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from None

    if not result.success:
        typer.echo(result.message or "Failed to export.", err=True)
        raise typer.Exit(1)
    typer.echo(f"Downloaded {result.row_count} rows to {result.path}")


@app.command("locate")
def locate_cmd(
    storage_state: Path | None = typer.Option(
        None, "--storage-state", envvar="BETEXPORT_STORAGE_STATE"
    ),
    cdp_url: str | None = typer.Option(
        None, "--cdp-url", envvar="BETEXPORT_CDP_URL"
    ),
) -> None:
    """Show where the access token and customer id were found."""
    config = _load_config()
    storage = _storage_backend(config, storage_state, cdp_url)
    try:
        snapshot = storage.read_storage()
    except StorageBackendError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from None

    token = find_access_token(snapshot)
    if token is None:
        typer.echo("Access token: not found", err=True)
        raise typer.Exit(1)
    typer.echo(
        f"Access token: {mask_token(token.value)} ({token.strategy}, {token.source})"
    )

    customer = find_customer_id(snapshot, token.value)
    if customer is None:
        typer.echo("Customer id: not found", err=True)
        raise typer.Exit(1)
    typer.echo(
        f"Customer id: {customer.value} ({customer.strategy}, {customer.source})"
    )


@app.command("dump-storage")
def dump_storage_cmd(
    cdp_url: str = typer.Option(..., "--cdp-url", envvar="BETEXPORT_CDP_URL"),
    out: Path = typer.Option(Path("storage.json"), "--out"),
) -> None:
    """Save a signed-in tab's storage to a JSON file for later --storage-state use."""
    from betexport.adapters.browser.playwright_cdp import PlaywrightCDPBackend

    config = _load_config()
    try:
        path = PlaywrightCDPBackend(cdp_url, site_host=config.site_host).dump(out)
    except StorageBackendError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Saved storage snapshot to {path}")


def main() -> None:
    app()
