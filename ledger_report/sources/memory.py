"""In-memory transaction source."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ledger_report.exceptions import InvalidInputError
from ledger_report.models import Transaction
from ledger_report.sources.base import check_range, in_range


@dataclass
class InMemoryTransactionSource:
    """Transaction source backed by a list, for tests and offline reports."""

    transactions: list[Transaction] = field(default_factory=list)

    _by_id: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        initial, self.transactions = self.transactions, []
        self.add_many(initial)

    def add_transaction(self, transaction: Transaction) -> None:
        """Add a transaction to the source."""
        if transaction.transaction_id in self._by_id:
            raise InvalidInputError(f"Duplicate transaction id {transaction.transaction_id}")

        self._by_id[transaction.transaction_id] = len(self.transactions)
        self.transactions.append(transaction)

    def add_many(self, transactions: Iterable[Transaction]) -> None:
        for tx in transactions:
            self.add_transaction(tx)

    def fetch(self, start: datetime | None = None, end: datetime | None = None) -> list[Transaction]:
        """Get transactions in ``[start, end)``."""
        check_range(start, end)
        return [tx for tx in self.transactions if in_range(tx, start, end)]

    def get(self, transaction_id: str) -> Transaction | None:
        """Get a transaction by id."""
        idx = self._by_id.get(transaction_id)
        return self.transactions[idx] if idx is not None else None

    def summary(self) -> dict[str, int]:
        """Return counts of stored transactions."""
        return {
            "transactions": len(self.transactions),
            "failed": sum(1 for tx in self.transactions if tx.is_failed),
        }
