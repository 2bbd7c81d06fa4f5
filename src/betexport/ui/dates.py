"""Date input handling done by the host before an export is started."""

from __future__ import annotations

from datetime import date
import re

MAX_RANGE_DAYS = 732

_WHITESPACE_RE = re.compile(r"\s+")
_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")


def normalize_date_input(raw: str | None) -> str | None:
    """Normalize user input to the ``DD/MM/YY`` display form.

    Accepts ``YYYY-MM-DD`` and ``D/M/YY`` or ``D/M/YYYY``. Returns None for
    anything else, including out-of-range days or months.
    """
    if not raw:
        return None
    cleaned = _WHITESPACE_RE.sub("", raw)

    iso = _ISO_RE.match(cleaned)
    if iso:
        year, month, day = iso.groups()
        return f"{day}/{month}/{year[-2:]}"

    match = _DMY_RE.match(cleaned)
    if not match:
        return None
    day, month, year = int(match[1]), int(match[2]), match[3]
    if not (1 <= day <= 31 and 1 <= month <= 12):
        return None
    return f"{day:02d}/{month:02d}/{year[-2:]}"


def to_api_date(ddmmyy: str | None) -> str | None:
    """``DD/MM/YY`` to the API's ``DD/MM/YYYY``; 4-digit years are kept."""
    if not ddmmyy:
        return None
    parts = ddmmyy.split("/")
    if len(parts) != 3 or not all(parts):
        return None
    day, month, year = parts
    full_year = year if len(year) == 4 else f"20{year}"
    return f"{day}/{month}/{full_year}"


def date_from_normalized(normalized: str | None) -> date | None:
    api_format = to_api_date(normalized)
    if not api_format:
        return None
    day, month, year = api_format.split("/")
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def is_range_within_limit(normalized_from: str, normalized_to: str) -> bool:
    """True when the two dates are at most ``MAX_RANGE_DAYS`` apart, either way."""
    start = date_from_normalized(normalized_from)
    end = date_from_normalized(normalized_to)
    if start is None or end is None:
        return False
    return abs((end - start).days) <= MAX_RANGE_DAYS
