"""Transaction source interface."""

from datetime import datetime
from typing import Protocol

from ledger_report.exceptions import InvalidInputError
from ledger_report.models import Transaction


class TransactionSource(Protocol):
    """Supplies raw transactions to the report engine."""

    def fetch(self, start: datetime | None = None, end: datetime | None = None) -> list[Transaction]:
        """Return transactions with ``start <= operation_time < end``.

        ``None`` leaves that side of the range open.
        """
        ...

    def get(self, transaction_id: str) -> Transaction | None:
        """Return one transaction by id, or ``None``."""
        ...


def check_range(start: datetime | None, end: datetime | None) -> None:
    """Reject ranges whose bounds are not datetimes or are reversed."""
    for name, bound in (("start", start), ("end", end)):
        if bound is not None and not isinstance(bound, datetime):
            raise InvalidInputError(f"Range {name} must be a datetime, got {bound!r}")
    if start is not None and end is not None and start > end:
        raise InvalidInputError(f"Range start {start} is after end {end}")


def in_range(tx: Transaction, start: datetime | None, end: datetime | None) -> bool:
    try:
        if start is not None and tx.operation_time < start:
            return False
        if end is not None and tx.operation_time >= end:
            return False
    except TypeError as e:
        # naive vs aware datetimes
        raise InvalidInputError(f"Transaction {tx.transaction_id}: {e}") from e
    return True
