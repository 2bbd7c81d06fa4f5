"""Flexible timestamp parsing shared by the fetcher cursor and the CSV rows."""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo
import math
from typing import Any

# Epoch values above this are milliseconds, below it seconds.
MILLIS_THRESHOLD = 1e12
MILLIS_MIN_DIGITS = 13

PARAM_FORMAT = "%Y-%m-%d %H:%M:%S"
DISPLAY_FORMAT = "%d/%m/%Y %H:%M"


def _from_epoch(seconds: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def to_datetime(value: Any, tz: tzinfo = UTC) -> datetime | None:
    """Parse ``value`` into an aware datetime, or None when it is not a time.

    Accepts:
    - ``datetime`` (naive values are taken to be in ``tz``) and ``date``
    - ints/floats and all-digit strings as epoch seconds or milliseconds
    - ISO 8601 strings, with ``T`` or a space between date and time

    Date-only ISO strings are read as UTC midnight; naive date-times as ``tz``.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz)
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        if not math.isfinite(value):
            return None
        return _from_epoch(value / 1000 if value > MILLIS_THRESHOLD else value)
    if not isinstance(value, str):
        return None

    trimmed = value.strip()
    if not trimmed:
        return None
    if trimmed.isascii() and trimmed.isdigit():
        number = int(trimmed)
        return _from_epoch(
            number / 1000 if len(trimmed) >= MILLIS_MIN_DIGITS else number
        )

    try:
        parsed = datetime.fromisoformat(trimmed)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        return parsed
    if len(trimmed) == len("YYYY-MM-DD"):
        return parsed.replace(tzinfo=UTC)
    return parsed.replace(tzinfo=tz)


def format_param_timestamp(value: Any, tz: tzinfo = UTC) -> str | None:
    """Render a cursor timestamp as UTC ``YYYY-MM-DD HH:MM:SS``.

    Unparseable values are sent as their string form; empty ones as None.
    """
    parsed = to_datetime(value, tz)
    if parsed is None:
        return str(value) if value else None
    return parsed.astimezone(UTC).strftime(PARAM_FORMAT)


def format_display_timestamp(value: Any, tz: tzinfo = UTC) -> str:
    """Render ``DD/MM/YYYY HH:MM`` (24-hour) in ``tz``.

    Empty values become ``""``; unparseable ones keep their string form.
    """
    if value is None or value == "":
        return ""
    parsed = to_datetime(value, tz)
    if parsed is None:
        return str(value)
    return parsed.astimezone(tz).strftime(DISPLAY_FORMAT)
