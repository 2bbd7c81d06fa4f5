"""Tests for CSV serialization of exported rows."""

from __future__ import annotations

from pathlib import Path

import pytest

from betexport.services.export.csv_writer import (
    EmptyResultError,
    export_file_name,
    to_csv,
)

HEADER = (
    '"Time","Type","Summary","Transaction Id","Bet Id","Amount","Balance",'
    '"Single","Multiple","Exotic","Pool"'
)


class TestToCsv:
    def test_header_and_one_row(self) -> None:
        # input
        records = [
            {
                "transactionTime": "2024-03-01T10:00:00Z",
                "type": "Deposit",
                "summary": "Card",
                "transactionId": "T1",
                "amount": 20,
                "balance": 20,
            }
        ]

        # act
        export = to_csv(records, "01/03/24", "31/03/24")

        # expected
        expected = (
            HEADER
            + "\n"
            + '"01/03/2024 10:00","Deposit","Card","T1","","20.00","20.00",'
            + '"false","false","false","false"\n'
        )

        # assert
        assert export.content.decode("utf-8") == expected
        assert export.row_count == 1
        assert export.file_name == "sportsbet-transactions-01-03-24-to-31-03-24.csv"

    def test_quotes_doubled_and_newlines_kept(self) -> None:
        records = [{"summary": 'He said "hi"\nthen left', "transactionId": "T1"}]

        text = to_csv(records, "01/03/24", "02/03/24").content.decode("utf-8")

        assert '"He said ""hi""\nthen left"' in text

    def test_one_row_per_record_in_order(self) -> None:
        records = [{"transactionId": f"T{i}"} for i in range(5)]

        export = to_csv(records, "01/03/24", "02/03/24")

        lines = export.content.decode("utf-8").splitlines()
        assert export.row_count == 5
        assert len(lines) == 6
        assert [line.split(",")[3] for line in lines[1:]] == [
            f'"T{i}"' for i in range(5)
        ]

    def test_empty_records(self) -> None:
        with pytest.raises(
            EmptyResultError, match="No transactions found for that date range."
        ):
            to_csv([], "01/03/24", "02/03/24")


class TestCsvExport:
    def test_write_to_creates_directory(self, tmp_path: Path) -> None:
        export = to_csv([{"transactionId": "T1"}], "01/03/24", "02/03/24")

        path = export.write_to(tmp_path / "out")

        assert path == tmp_path / "out" / export.file_name
        assert path.read_bytes() == export.content


class TestExportFileName:
    def test_slashes_become_dashes(self) -> None:
        assert (
            export_file_name("01/02/24", "31/03/24")
            == "sportsbet-transactions-01-02-24-to-31-03-24.csv"
        )
