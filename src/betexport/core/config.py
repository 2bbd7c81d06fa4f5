from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_API_URL = "https://www.sportsbet.com.au/apigw/history/transactions"
DEFAULT_SITE_HOST = "sportsbet.com.au"
DEFAULT_PAGE_SIZE = 50
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_DISPLAY_TZ = "Australia/Sydney"
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class ExportConfig:
    """Runtime settings for an export run, loaded once at process startup."""

    api_url: str = DEFAULT_API_URL
    site_host: str = DEFAULT_SITE_HOST
    page_size: int = DEFAULT_PAGE_SIZE
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS
    max_pages: int | None = None
    display_tz: str = DEFAULT_DISPLAY_TZ
    output_dir: Path = Path(".")
    log_level: str = "INFO"

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.display_tz)


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _timeout(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(
            f"BETEXPORT_TIMEOUT_SECONDS must be a number, got {raw!r}"
        ) from None
    if value < 0:
        raise ValueError("BETEXPORT_TIMEOUT_SECONDS must not be negative")
    # 0 disables the per-request timeout
    return value or None


def load_export_config_from_env() -> ExportConfig:
    """Load export config from env and validate it up front."""
    api_url = os.environ.get("BETEXPORT_API_URL", DEFAULT_API_URL).strip()
    if not api_url.startswith(("https://", "http://")):
        raise ValueError("BETEXPORT_API_URL must be an http(s) URL")

    site_host = os.environ.get("BETEXPORT_SITE_HOST", DEFAULT_SITE_HOST).strip()

    page_size = _positive_int(
        "BETEXPORT_PAGE_SIZE",
        os.environ.get("BETEXPORT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)).strip(),
    )

    timeout_seconds = _timeout(
        os.environ.get("BETEXPORT_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
    )

    max_pages_raw = os.environ.get("BETEXPORT_MAX_PAGES", "").strip()
    max_pages = (
        _positive_int("BETEXPORT_MAX_PAGES", max_pages_raw) if max_pages_raw else None
    )

    display_tz = os.environ.get("BETEXPORT_DISPLAY_TZ", DEFAULT_DISPLAY_TZ).strip()
    try:
        ZoneInfo(display_tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown BETEXPORT_DISPLAY_TZ: {display_tz!r}") from None

    output_dir = Path(os.environ.get("BETEXPORT_OUTPUT_DIR", ".")).expanduser()

    log_level = os.environ.get("BETEXPORT_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            "BETEXPORT_LOG_LEVEL must be one of: " + ", ".join(sorted(LOG_LEVELS))
        )

    return ExportConfig(
        api_url=api_url,
        site_host=site_host,
        page_size=page_size,
        timeout_seconds=timeout_seconds,
        max_pages=max_pages,
        display_tz=display_tz,
        output_dir=output_dir,
        log_level=log_level,
    )
