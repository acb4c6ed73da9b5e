"""Grouping of cleaned transactions into report buckets."""

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Hashable, Iterable, TypeVar

from ledger_report.engine.dedup import remove_offsetting_pairs
from ledger_report.engine.policy import ReportPolicy
from ledger_report.exceptions import InvalidInputError
from ledger_report.logging import get_logger
from ledger_report.models import Transaction

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)

ZERO = Decimal("0")


@dataclass
class ReportBucket:
    """Accumulator for one bucket.

    ``total_expense`` is kept signed (``<= 0``) so that
    ``net_amount == total_income + total_expense`` holds exactly.
    """

    key: Hashable
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    net_amount: Decimal = ZERO
    transaction_count: int = 0
    transactions: list[Transaction] = field(default_factory=list)

    def add(self, tx: Transaction) -> None:
        """Accumulate a transaction into the bucket."""
        if tx.amount > 0:
            self.total_income += tx.amount
        elif tx.amount < 0:
            self.total_expense += tx.amount
        self.net_amount += tx.amount
        self.transaction_count += 1
        self.transactions.append(tx)

    @property
    def expense_magnitude(self) -> Decimal:
        return -self.total_expense


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the half-open range ``[first day, first day of next month)``."""
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise InvalidInputError(f"Invalid year: {year!r}")
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInputError(f"Invalid month: {month!r}")
    start = datetime(year, month, 1)
    if month == 12:
        if year == 9999:
            raise InvalidInputError(f"Year out of range: {year}")
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def days_in_month(year: int, month: int) -> int:
    month_bounds(year, month)
    return calendar.monthrange(year, month)[1]


def filter_month(transactions: Iterable[Transaction], year: int, month: int) -> list[Transaction]:
    """Keep transactions whose operation time falls in the given month."""
    month_bounds(year, month)
    return [
        tx for tx in transactions
        if tx.operation_time.year == year and tx.operation_time.month == month
    ]


def apply_policy(transactions: Iterable[Transaction], policy: ReportPolicy) -> list[Transaction]:
    """Drop failed or status-less rows, excluded descriptions and offsetting pairs.

    Parameters
    ----------
    transactions : Iterable[Transaction]
        Raw rows from a transaction source.
    policy : ReportPolicy
        Exclusion set and tolerance window of the report.

    Returns
    -------
    list[Transaction]
        Rows that participate in aggregation, in input order.
    """
    rows = list(transactions)
    kept = [
        tx for tx in rows
        if tx.is_reportable and tx.description not in policy.excluded_descriptions
    ]
    logger.debug("Policy excluded %d of %d transactions", len(rows) - len(kept), len(rows))

    if policy.tolerance is not None:
        kept = remove_offsetting_pairs(kept, policy.tolerance)
    return kept


def bucket_by(
    transactions: Iterable[Transaction],
    key: Callable[[Transaction], K],
) -> dict[K, ReportBucket]:
    """Group transactions by ``key``; buckets keep first-seen order."""
    buckets: dict[K, ReportBucket] = {}
    for tx in transactions:
        k = key(tx)
        bucket = buckets.get(k)
        if bucket is None:
            bucket = buckets[k] = ReportBucket(key=k)
        bucket.add(tx)
    return buckets


def bucket_by_month(transactions: Iterable[Transaction]) -> dict[tuple[int, int], ReportBucket]:
    """Group by ``(year, month)``, newest month first."""
    buckets = bucket_by(transactions, lambda tx: (tx.operation_time.year, tx.operation_time.month))
    return dict(sorted(buckets.items(), key=lambda item: item[0], reverse=True))


def bucket_by_year(transactions: Iterable[Transaction]) -> dict[int, ReportBucket]:
    """Group by year, newest year first."""
    buckets = bucket_by(transactions, lambda tx: tx.operation_time.year)
    return dict(sorted(buckets.items(), key=lambda item: item[0], reverse=True))


def bucket_by_day(transactions: Iterable[Transaction], year: int, month: int) -> dict[int, ReportBucket]:
    """Group one month by day of month with a bucket for every calendar day.

    Transactions outside the month are ignored. Days without transactions
    get an empty bucket.
    """
    buckets = {day: ReportBucket(key=day) for day in range(1, days_in_month(year, month) + 1)}
    for tx in filter_month(transactions, year, month):
        buckets[tx.operation_time.day].add(tx)
    return buckets


def bucket_by_category(
    transactions: Iterable[Transaction],
    uncategorized_label: str = "Uncategorized",
) -> dict[str, ReportBucket]:
    """Group expenses by effective category, largest total first.

    Only outflows are counted. Ties keep first-seen order.
    """
    expenses = [tx for tx in transactions if tx.is_expense]
    buckets = bucket_by(
        expenses,
        lambda tx: tx.effective_category if tx.effective_category is not None else uncategorized_label,
    )
    # sorted() is stable, so equal totals stay in insertion order
    ordered = sorted(buckets.items(), key=lambda item: item[1].expense_magnitude, reverse=True)
    return dict(ordered)
