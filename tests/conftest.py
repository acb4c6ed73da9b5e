"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime
from decimal import Decimal
from typing import Callable

import pytest

from ledger_report.models import Transaction, TransactionStatus

MakeTx = Callable[..., Transaction]


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def base_time() -> datetime:
    """Reference operation time inside April 2024."""
    return datetime(2024, 4, 10, 12, 0, 0)


@pytest.fixture
def make_tx() -> MakeTx:
    """Factory for transactions with sequential ids."""
    counter = itertools.count(1)

    def _make(
        amount: str | int | Decimal,
        when: datetime,
        *,
        status: TransactionStatus | str | None = TransactionStatus.OK,
        description: str = "Покупка",
        category: str | None = "Супермаркеты",
        override_category: str | None = None,
        transaction_id: str | None = None,
    ) -> Transaction:
        return Transaction(
            transaction_id=transaction_id or f"tx-{next(counter):04d}",
            operation_time=when,
            amount=Decimal(str(amount)),
            status=status,
            description=description,
            category=category,
            override_category=override_category,
        )

    return _make
