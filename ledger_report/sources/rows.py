"""Mapping between ledger table rows and ``Transaction`` objects.

Rows use the column names of the ``transactions`` table
(``date_of_operation``, ``operation_amount``, ``my_category`` ...).
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from ledger_report.exceptions import InvalidInputError
from ledger_report.models import Transaction, TransactionStatus
from ledger_report.serialization import serialize_value

COLUMNS = (
    "transaction_id",
    "date_of_operation",
    "date_of_payment",
    "card_number",
    "status",
    "operation_amount",
    "operation_currency",
    "payment_amount",
    "payment_currency",
    "cashback",
    "category",
    "mcc",
    "description",
    "bonuses",
    "my_category",
    "my_comment",
)


def parse_datetime(value: Any, field_name: str = "date") -> datetime:
    """Parse a datetime, a date or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidInputError(f"Unparseable {field_name}: {value!r}") from e
    raise InvalidInputError(f"Unparseable {field_name}: {value!r}")


def parse_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Parse an exact decimal from a Decimal, int, float or numeric string."""
    if isinstance(value, bool):
        raise InvalidInputError(f"Non-numeric {field_name}: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 becomes Decimal("0.1")
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip().replace(",", "."))
        except InvalidOperation as e:
            raise InvalidInputError(f"Non-numeric {field_name}: {value!r}") from e
    else:
        raise InvalidInputError(f"Non-numeric {field_name}: {value!r}")

    if not result.is_finite():
        raise InvalidInputError(f"Non-finite {field_name}: {value!r}")
    return result


def _optional(row: Mapping[str, Any], key: str) -> Any:
    value = row.get(key)
    if isinstance(value, str) and not value.strip():
        return None
    return value


def parse_status(value: Any) -> TransactionStatus | str | None:
    """Known statuses become ``TransactionStatus``; others are kept as given.

    ``None`` stays ``None`` so a NULL column is never mistaken for OK.
    """
    if value is None or isinstance(value, TransactionStatus):
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"Transaction status must be a string, got {value!r}")
    status = value.strip()
    try:
        return TransactionStatus(status.upper())
    except ValueError:
        return status


def transaction_from_row(row: Mapping[str, Any]) -> Transaction:
    """Build a ``Transaction`` from a table row.

    Parameters
    ----------
    row : Mapping[str, Any]
        Row keyed by column name. A row without a ``status`` key is OK;
        an explicit ``None`` status is kept as ``None``.

    Returns
    -------
    Transaction
        Parsed transaction.

    Raises
    ------
    InvalidInputError
        When the id, operation date or amount is missing, or a field is malformed.
    """
    transaction_id = row.get("transaction_id")
    if transaction_id is None or str(transaction_id).strip() == "":
        raise InvalidInputError(f"Row without transaction_id: {dict(row)!r}")
    transaction_id = str(transaction_id)

    if row.get("date_of_operation") is None:
        raise InvalidInputError(f"Transaction {transaction_id}: missing date_of_operation")
    if row.get("operation_amount") is None:
        raise InvalidInputError(f"Transaction {transaction_id}: missing operation_amount")

    payment_time = _optional(row, "date_of_payment")
    payment_amount = _optional(row, "payment_amount")
    cashback = _optional(row, "cashback")
    bonuses = _optional(row, "bonuses")
    mcc = _optional(row, "mcc")

    return Transaction(
        transaction_id=transaction_id,
        operation_time=parse_datetime(row["date_of_operation"], "date_of_operation"),
        amount=parse_decimal(row["operation_amount"], "operation_amount"),
        status=parse_status(row.get("status", TransactionStatus.OK)),
        description=row.get("description") or "",
        category=_optional(row, "category"),
        override_category=row.get("my_category"),
        payment_time=parse_datetime(payment_time, "date_of_payment") if payment_time is not None else None,
        card_number=_optional(row, "card_number"),
        currency=row.get("operation_currency") or "RUB",
        payment_amount=parse_decimal(payment_amount, "payment_amount") if payment_amount is not None else None,
        payment_currency=_optional(row, "payment_currency"),
        cashback=parse_decimal(cashback, "cashback") if cashback is not None else None,
        mcc=str(mcc) if mcc is not None else None,
        bonuses=parse_decimal(bonuses, "bonuses") if bonuses is not None else None,
        comment=row.get("my_comment") or "",
    )


def transaction_to_row(tx: Transaction) -> dict[str, Any]:
    """Inverse of :func:`transaction_from_row` with JSON-ready values."""
    row = {
        "transaction_id": tx.transaction_id,
        "date_of_operation": tx.operation_time,
        "date_of_payment": tx.payment_time,
        "card_number": tx.card_number,
        "status": tx.status,
        "operation_amount": tx.amount,
        "operation_currency": tx.currency,
        "payment_amount": tx.payment_amount,
        "payment_currency": tx.payment_currency,
        "cashback": tx.cashback,
        "category": tx.category,
        "mcc": tx.mcc,
        "description": tx.description,
        "bonuses": tx.bonuses,
        "my_category": tx.override_category,
        "my_comment": tx.comment,
    }
    return {key: serialize_value(value) for key, value in row.items()}
