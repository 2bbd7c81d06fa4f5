"""Credential types produced by the locator."""

from __future__ import annotations

from dataclasses import dataclass
import re

from pydantic import BaseModel, ConfigDict, field_validator

_DIGITS_RE = re.compile(r"^\d+$")


def mask_token(token: str) -> str:
    """Keep the first 6 and last 4 characters, enough to tell tokens apart."""
    return f"{token[:6]}...{token[-4:]}"


class Credential(BaseModel):
    """Access token and customer id for one export run. Never persisted."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    customer_id: str

    @field_validator("access_token")
    @classmethod
    def token_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value or any(ch.isspace() for ch in value):
            raise ValueError("access_token must be a single non-empty word")
        return value

    @field_validator("customer_id")
    @classmethod
    def customer_id_is_digits(cls, value: str) -> str:
        if not _DIGITS_RE.match(value):
            raise ValueError("customer_id must contain only digits")
        return value

    def masked_token(self) -> str:
        return mask_token(self.access_token)

    def __repr__(self) -> str:
        return (
            f"Credential(access_token={self.masked_token()!r}, "
            f"customer_id={self.customer_id!r})"
        )

    __str__ = __repr__


@dataclass(frozen=True, slots=True)
class Candidate:
    """A value accepted by one locator strategy, with where it was found."""

    value: str
    strategy: str
    source: str
