"""Tests for CredentialLocatorLogger output."""

from __future__ import annotations

from collections.abc import Iterator

from loguru import logger
import pytest

from betexport.services.credentials.logger import CredentialLocatorLogger
from betexport.services.credentials.types import Candidate

TOKEN = "abcdefghij.KLMNOPQRST.uvwxyz0123"  # noqa: S105


@pytest.fixture
def records() -> Iterator[list[dict]]:
    captured: list[dict] = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(sink_id)


class TestCredentialLocatorLogger:
    def test_token_found_logs_source_not_value(self, records: list[dict]) -> None:
        # setup
        log = CredentialLocatorLogger()
        candidate = Candidate(
            value=TOKEN, strategy="raw-value", source="localStorage:auth"
        )

        # act
        log.token_found(candidate)

        # assert
        assert len(records) == 1
        record = records[0]
        assert record["message"] == (
            "Access token found via raw-value in localStorage:auth"
        )
        assert record["extra"]["length"] == len(TOKEN)
        assert TOKEN not in record["message"]
        assert TOKEN not in record["extra"].values()

    def test_missing_messages_are_warnings(self, records: list[dict]) -> None:
        log = CredentialLocatorLogger()

        log.token_missing()
        log.customer_missing()

        assert [r["level"].name for r in records] == ["WARNING", "WARNING"]
