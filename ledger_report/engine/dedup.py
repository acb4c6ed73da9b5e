"""Offsetting-pair removal.

A charge and its reversal often arrive as two rows with opposite amounts a
few minutes apart. Both rows are dropped before aggregation.

A row is dropped when *any* other row (different id) has the exact opposite
amount within the tolerance window. This is an existence check, not a
one-to-one pairing: with ``+100, -100, +100`` inside the window all three
rows are dropped.
"""

from bisect import bisect_left
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from ledger_report.exceptions import InvalidInputError
from ledger_report.logging import get_logger
from ledger_report.models import Transaction

logger = get_logger(__name__)


def _check_tolerance(tolerance: timedelta) -> None:
    if not isinstance(tolerance, timedelta):
        raise InvalidInputError(f"Tolerance must be a timedelta, got {type(tolerance).__name__}")
    if tolerance < timedelta(0):
        raise InvalidInputError(f"Tolerance must be non-negative, got {tolerance}")


def find_offsetting(transactions: Iterable[Transaction], tolerance: timedelta) -> set[str]:
    """Return ids of transactions that have an opposite-amount counterpart.

    Parameters
    ----------
    transactions : Iterable[Transaction]
        Rows in any order.
    tolerance : timedelta
        Maximum ``|time_i - time_j|`` for a pair.

    Returns
    -------
    set[str]
        Ids to exclude.
    """
    _check_tolerance(tolerance)
    rows = list(transactions)

    # amount -> [(operation_time, transaction_id)] sorted by time
    by_amount: dict[Decimal, list[tuple[datetime, str]]] = defaultdict(list)
    for tx in rows:
        by_amount[tx.amount].append((tx.operation_time, tx.transaction_id))
    times_by_amount: dict[Decimal, list[datetime]] = {}
    for amount, entries in by_amount.items():
        try:
            entries.sort()
        except TypeError as e:
            raise InvalidInputError(f"Cannot compare operation times for amount {amount}: {e}") from e
        times_by_amount[amount] = [t for t, _ in entries]

    offsetting: set[str] = set()
    for tx in rows:
        candidates = by_amount.get(-tx.amount)
        if not candidates:
            continue
        times = times_by_amount[-tx.amount]
        try:
            start = bisect_left(times, tx.operation_time - tolerance)
        except TypeError as e:
            raise InvalidInputError(
                f"Transaction {tx.transaction_id}: cannot compare operation times: {e}"
            ) from e
        for other_time, other_id in candidates[start:]:
            if other_time - tx.operation_time > tolerance:
                break
            if other_id != tx.transaction_id:
                offsetting.add(tx.transaction_id)
                break

    return offsetting


def remove_offsetting_pairs(
    transactions: Iterable[Transaction],
    tolerance: timedelta,
) -> list[Transaction]:
    """Drop every transaction that belongs to an offsetting pair.

    Input order is preserved and the transactions themselves are untouched.
    """
    rows = list(transactions)
    offsetting = find_offsetting(rows, tolerance)
    if offsetting:
        logger.debug("Removed %d offsetting transactions of %d", len(offsetting), len(rows))
    return [tx for tx in rows if tx.transaction_id not in offsetting]
