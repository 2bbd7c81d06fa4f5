"""Tests for timestamp parsing and rendering."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

import pytest

from betexport.core.timestamps import (
    format_display_timestamp,
    format_param_timestamp,
    to_datetime,
)

SYDNEY = ZoneInfo("Australia/Sydney")
EXPECTED_UTC = datetime(2024, 3, 1, 10, 0, tzinfo=UTC)


class TestToDatetime:
    @pytest.mark.parametrize(
        "value",
        [
            1709287200,
            1709287200.0,
            1709287200000,
            "1709287200",
            "1709287200000",
            "2024-03-01T10:00:00Z",
            "2024-03-01 10:00:00+00:00",
            "2024-03-01T21:00:00+11:00",
            datetime(2024, 3, 1, 10, 0, tzinfo=UTC),
        ],
    )
    def test_same_instant_in_every_form(self, value: object) -> None:
        assert to_datetime(value) == EXPECTED_UTC

    def test_naive_datetime_string_uses_given_zone(self) -> None:
        # input
        value = "2024-03-01T21:00:00"

        # act
        parsed = to_datetime(value, SYDNEY)

        # assert
        assert parsed == EXPECTED_UTC

    def test_date_only_string_is_utc_midnight(self) -> None:
        assert to_datetime("2024-03-01", SYDNEY) == datetime(2024, 3, 1, tzinfo=UTC)

    def test_date_object(self) -> None:
        assert to_datetime(date(2024, 3, 1)) == datetime(2024, 3, 1, tzinfo=UTC)

    @pytest.mark.parametrize(
        "value", [None, "", "   ", "yesterday", True, float("nan"), [1], {"a": 1}]
    )
    def test_not_a_time(self, value: object) -> None:
        assert to_datetime(value) is None


class TestFormatParamTimestamp:
    def test_rendered_in_utc(self) -> None:
        assert format_param_timestamp(1709287200, SYDNEY) == "2024-03-01 10:00:00"

    def test_unparseable_kept_as_text(self) -> None:
        assert format_param_timestamp("soon") == "soon"

    def test_empty_is_none(self) -> None:
        assert format_param_timestamp(None) is None
        assert format_param_timestamp("") is None


class TestFormatDisplayTimestamp:
    def test_rendered_in_display_zone(self) -> None:
        assert format_display_timestamp(1709287200, SYDNEY) == "01/03/2024 21:00"

    def test_utc_default(self) -> None:
        assert format_display_timestamp("2024-03-01T10:00:00Z") == "01/03/2024 10:00"

    def test_empty_values(self) -> None:
        assert format_display_timestamp(None) == ""
        assert format_display_timestamp("") == ""

    def test_unparseable_kept_as_text(self) -> None:
        assert format_display_timestamp("Mon 4pm") == "Mon 4pm"

