"""Tests for transaction sources and row mapping."""

import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from ledger_report.exceptions import InvalidInputError, SourceError
from ledger_report.models import TransactionStatus
from ledger_report.sources import (
    InMemoryTransactionSource,
    JsonFileTransactionSource,
    PostgresTransactionSource,
    transaction_from_row,
    transaction_to_row,
)
from ledger_report.sources.rows import parse_datetime, parse_decimal


@pytest.fixture
def row() -> dict:
    """A row as returned by the transactions table."""
    return {
        "transaction_id": 1001,
        "date_of_operation": datetime(2024, 4, 10, 18, 45, 12),
        "date_of_payment": date(2024, 4, 11),
        "card_number": "*1234",
        "status": "OK",
        "operation_amount": Decimal("-1530.00"),
        "operation_currency": "RUB",
        "payment_amount": Decimal("-1530.00"),
        "payment_currency": "RUB",
        "cashback": None,
        "category": "Супермаркеты",
        "mcc": 5411,
        "description": "Пятёрочка",
        "bonuses": Decimal("15"),
        "my_category": None,
        "my_comment": None,
    }


class TestRows:
    """Tests for row decoding."""

    def test_from_row(self, row: dict) -> None:
        tx = transaction_from_row(row)

        assert tx.transaction_id == "1001"
        assert tx.amount == Decimal("-1530.00")
        assert tx.status == TransactionStatus.OK
        assert tx.payment_time == datetime(2024, 4, 11)
        assert tx.mcc == "5411"
        assert tx.cashback is None
        assert tx.bonuses == Decimal("15")
        assert tx.comment == ""
        assert tx.effective_category == "Супермаркеты"

    def test_user_category_and_comment(self, row: dict) -> None:
        row.update(my_category="Продукты", my_comment="на неделю")

        tx = transaction_from_row(row)

        assert tx.effective_category == "Продукты"
        assert tx.comment == "на неделю"

    def test_string_values(self, row: dict) -> None:
        row.update(date_of_operation="2024-04-10T18:45:12", operation_amount="-1530,50", status="failed")

        tx = transaction_from_row(row)

        assert tx.operation_time == datetime(2024, 4, 10, 18, 45, 12)
        assert tx.amount == Decimal("-1530.50")
        assert tx.status == TransactionStatus.FAILED

    def test_float_amount_keeps_short_repr(self, row: dict) -> None:
        row["operation_amount"] = -0.1

        assert transaction_from_row(row).amount == Decimal("-0.1")

    def test_missing_status_defaults_to_ok(self, row: dict) -> None:
        del row["status"]

        assert transaction_from_row(row).status == TransactionStatus.OK

    def test_unknown_status_kept_as_given(self, row: dict) -> None:
        row["status"] = " Waiting "

        tx = transaction_from_row(row)

        assert tx.status == "Waiting"
        assert not tx.is_failed
        assert transaction_to_row(tx)["status"] == "Waiting"

    def test_null_status_kept_as_none(self, row: dict) -> None:
        row["status"] = None

        tx = transaction_from_row(row)

        assert tx.status is None
        assert not tx.is_reportable
        assert transaction_from_row(transaction_to_row(tx)) == tx

    @pytest.mark.parametrize(
        "key,value,match",
        [
            ("transaction_id", None, "transaction_id"),
            ("transaction_id", " ", "transaction_id"),
            ("date_of_operation", None, "date_of_operation"),
            ("date_of_operation", "10/04/2024", "date_of_operation"),
            ("operation_amount", None, "operation_amount"),
            ("operation_amount", "abc", "operation_amount"),
            ("operation_amount", True, "operation_amount"),
            ("operation_amount", "NaN", "operation_amount"),
            ("status", 3, "status"),
            ("date_of_payment", "yesterday", "date_of_payment"),
            ("cashback", "lots", "cashback"),
        ],
    )
    def test_malformed_rows(self, row: dict, key: str, value, match: str) -> None:
        row[key] = value

        with pytest.raises(InvalidInputError, match=match):
            transaction_from_row(row)

    def test_parse_helpers(self) -> None:
        assert parse_datetime(date(2024, 1, 2)) == datetime(2024, 1, 2)
        assert parse_decimal(7) == Decimal("7")
        with pytest.raises(InvalidInputError):
            parse_decimal([1])

    def test_to_row_round_trip(self, row: dict) -> None:
        tx = transaction_from_row(row)

        encoded = transaction_to_row(tx)

        assert encoded["operation_amount"] == "-1530.00"
        assert encoded["date_of_operation"] == "2024-04-10T18:45:12"
        assert encoded["status"] == "OK"
        assert transaction_from_row(encoded) == tx


class TestInMemorySource:
    """Tests for InMemoryTransactionSource."""

    def test_fetch_half_open_range(self, make_tx) -> None:
        rows = [
            make_tx("1", datetime(2024, 3, 31, 23, 59)),
            make_tx("2", datetime(2024, 4, 1)),
            make_tx("3", datetime(2024, 4, 30, 23, 59)),
            make_tx("4", datetime(2024, 5, 1)),
        ]
        source = InMemoryTransactionSource(rows)

        assert source.fetch(datetime(2024, 4, 1), datetime(2024, 5, 1)) == rows[1:3]
        assert source.fetch() == rows
        assert source.fetch(start=datetime(2024, 4, 30)) == rows[2:]

    def test_get(self, make_tx, base_time: datetime) -> None:
        tx = make_tx("1", base_time, transaction_id="abc")
        source = InMemoryTransactionSource([tx])

        assert source.get("abc") is tx
        assert source.get("missing") is None

    def test_duplicate_id_rejected(self, make_tx, base_time: datetime) -> None:
        source = InMemoryTransactionSource([make_tx("1", base_time, transaction_id="abc")])

        with pytest.raises(InvalidInputError, match="Duplicate"):
            source.add_transaction(make_tx("2", base_time, transaction_id="abc"))

    def test_reversed_range(self) -> None:
        with pytest.raises(InvalidInputError, match="after"):
            InMemoryTransactionSource().fetch(datetime(2024, 5, 1), datetime(2024, 4, 1))

    def test_range_must_be_datetimes(self) -> None:
        with pytest.raises(InvalidInputError, match="start"):
            InMemoryTransactionSource().fetch("2024-04-01")  # type: ignore[arg-type]

    def test_summary(self, make_tx, base_time: datetime) -> None:
        source = InMemoryTransactionSource(
            [make_tx("1", base_time), make_tx("-1", base_time, status=TransactionStatus.FAILED)]
        )

        assert source.summary() == {"transactions": 2, "failed": 1}


class TestJsonFileSource:
    """Tests for JsonFileTransactionSource."""

    def test_write_and_fetch(self, tmp_path: Path, make_tx) -> None:
        rows = [
            make_tx("-10.50", datetime(2024, 4, 1, 10)),
            make_tx("20", datetime(2024, 5, 1, 10)),
        ]
        path = JsonFileTransactionSource.write(tmp_path / "out" / "ledger.json", rows, pretty=True)

        source = JsonFileTransactionSource(path)

        assert source.fetch() == rows
        assert source.fetch(datetime(2024, 4, 1), datetime(2024, 5, 1)) == rows[:1]
        assert source.get(rows[1].transaction_id) == rows[1]
        assert source.get("missing") is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError, match="Cannot read"):
            JsonFileTransactionSource(tmp_path / "nope.json").fetch()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SourceError, match="Invalid JSON"):
            JsonFileTransactionSource(path).fetch()

    def test_not_an_array(self, tmp_path: Path) -> None:
        path = tmp_path / "obj.json"
        path.write_text(json.dumps({"transaction_id": "1"}), encoding="utf-8")

        with pytest.raises(InvalidInputError, match="JSON array"):
            JsonFileTransactionSource(path).fetch()

    def test_bad_row(self, tmp_path: Path) -> None:
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"transaction_id": "1", "date_of_operation": "2024-04-01",
                                     "operation_amount": "x"}]), encoding="utf-8")

        with pytest.raises(InvalidInputError, match="operation_amount"):
            JsonFileTransactionSource(path).fetch()


class TestPostgresSource:
    """Tests for PostgresTransactionSource with a mocked connection."""

    @pytest.fixture
    def cursor(self, row: dict) -> MagicMock:
        cur = MagicMock()
        cur.fetchall.return_value = [row]
        return cur

    @pytest.fixture
    def mock_connect(self, cursor: MagicMock):
        conn = MagicMock()
        conn.__enter__.return_value = conn
        conn.cursor.return_value.__enter__.return_value = cursor
        with patch("ledger_report.sources.postgres.psycopg.connect", return_value=conn) as connect:
            yield connect

    def test_fetch_range(self, mock_connect: MagicMock, cursor: MagicMock) -> None:
        source = PostgresTransactionSource("postgresql://u:p@db:5432/ledger")

        result = source.fetch(datetime(2024, 4, 1), datetime(2024, 5, 1))

        assert [tx.transaction_id for tx in result] == ["1001"]
        assert mock_connect.call_args.args[0] == "postgresql://u:p@db:5432/ledger"
        params = cursor.execute.call_args.args[1]
        assert params == {"start": datetime(2024, 4, 1), "end": datetime(2024, 5, 1)}

    def test_fetch_all_time(self, mock_connect: MagicMock, cursor: MagicMock) -> None:
        PostgresTransactionSource("postgresql://localhost/ledger").fetch()

        assert cursor.execute.call_args.args[1] == {}

    def test_get(self, mock_connect: MagicMock, cursor: MagicMock) -> None:
        tx = PostgresTransactionSource("postgresql://localhost/ledger").get("1001")

        assert tx is not None and tx.amount == Decimal("-1530.00")
        assert cursor.execute.call_args.args[1] == {"id": "1001"}

    def test_get_missing(self, mock_connect: MagicMock, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = []

        assert PostgresTransactionSource("postgresql://localhost/ledger").get("x") is None

    def test_driver_error_wrapped(self) -> None:
        with patch(
            "ledger_report.sources.postgres.psycopg.connect",
            side_effect=psycopg.OperationalError("connection refused"),
        ):
            with pytest.raises(SourceError, match="connection refused"):
                PostgresTransactionSource("postgresql://localhost/ledger").fetch()
