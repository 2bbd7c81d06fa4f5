"""Field lookup over schema-less transaction records."""

from __future__ import annotations

from collections.abc import Mapping
import math
from typing import Any

TransactionRecord = Mapping[str, Any]

# Alternative source keys per logical field, most preferred first.
TIMESTAMP_KEYS = (
    "transactionTime",
    "transactionDate",
    "date",
    "time",
    "transaction_time",
)
TRANSACTION_ID_KEYS = ("transactionId", "transactionID", "id")


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, int | float):
        return value == 0 or math.isnan(value)
    return False


def first_present(record: Any, keys: tuple[str, ...]) -> Any:
    """Return the first value under ``keys`` that is not blank.

    Blank means None, ``""``, ``False``, zero or NaN, so a zero under a
    preferred key falls through to the next alternative. Callers supply the
    zero or empty default themselves. Records that are not mappings have no
    fields.
    """
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        if not _is_blank(value):
            return value
    return None
