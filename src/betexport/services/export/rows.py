"""Map heterogeneous transaction records onto the fixed CSV row."""

from __future__ import annotations

from datetime import UTC, tzinfo
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from betexport.core.records import (
    TIMESTAMP_KEYS,
    TRANSACTION_ID_KEYS,
    TransactionRecord,
    first_present,
)
from betexport.core.timestamps import format_display_timestamp

TYPE_KEYS = ("type", "transactionType")
SUMMARY_KEYS = ("summary", "description", "detail")
BET_ID_KEYS = ("betId", "betSlipId", "wagerId")
AMOUNT_KEYS = ("amount", "value", "stakeChange", "credit", "debit")
BALANCE_KEYS = ("balance", "balanceAmount", "runningBalance")
SINGLE_KEYS = ("single", "isSingle")
MULTIPLE_KEYS = ("multiple", "isMulti")
EXOTIC_KEYS = ("exotic", "isExotic")
POOL_KEYS = ("pool", "isPool")


def to_bool_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered
    return "false"


def to_decimal_text(value: Any) -> str:
    """Two-decimal rendering; values that are not numbers keep their text."""
    if value is None:
        return "0.00"
    if isinstance(value, str) and not value.strip():
        return "0.00"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if not math.isfinite(number):
        return str(value)
    return f"{number:.2f}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class CsvRow(BaseModel):
    """One exported row. Aliases are the CSV column headers, in order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: str = Field(alias="Time")
    type: str = Field(alias="Type")
    summary: str = Field(alias="Summary")
    transaction_id: str = Field(alias="Transaction Id")
    bet_id: str = Field(alias="Bet Id")
    amount: str = Field(alias="Amount")
    balance: str = Field(alias="Balance")
    single: str = Field(alias="Single")
    multiple: str = Field(alias="Multiple")
    exotic: str = Field(alias="Exotic")
    pool: str = Field(alias="Pool")

    @classmethod
    def columns(cls) -> list[str]:
        return [field.alias or name for name, field in cls.model_fields.items()]

    @classmethod
    def from_record(cls, record: TransactionRecord, tz: tzinfo = UTC) -> CsvRow:
        """Read each column from its first present source key, with defaults."""
        raw_time = first_present(record, (*TIMESTAMP_KEYS, "createdAt"))
        return cls(
            time=format_display_timestamp(raw_time, tz),
            type=_text(first_present(record, TYPE_KEYS)),
            summary=_text(first_present(record, SUMMARY_KEYS)),
            transaction_id=_text(first_present(record, TRANSACTION_ID_KEYS)),
            bet_id=_text(first_present(record, BET_ID_KEYS)),
            amount=to_decimal_text(first_present(record, AMOUNT_KEYS)),
            balance=to_decimal_text(first_present(record, BALANCE_KEYS)),
            single=to_bool_text(first_present(record, SINGLE_KEYS)),
            multiple=to_bool_text(first_present(record, MULTIPLE_KEYS)),
            exotic=to_bool_text(first_present(record, EXOTIC_KEYS)),
            pool=to_bool_text(first_present(record, POOL_KEYS)),
        )

    def values(self) -> list[str]:
        return list(self.model_dump().values())
