"""Report service: transaction source -> policy -> buckets -> records."""

from datetime import datetime, timedelta

from ledger_report.engine import (
    ReportPolicies,
    ReportPolicy,
    apply_policy,
    bucket_by_category,
    bucket_by_day,
    bucket_by_month,
    bucket_by_year,
    category_shares,
    daily_points,
    filter_month,
    month_bounds,
    monthly_records,
    summary_record,
    yearly_records,
)
from ledger_report.exceptions import TransactionNotFoundError
from ledger_report.logging import get_logger
from ledger_report.models import (
    CategoryShare,
    DailyMeasure,
    DailyPoint,
    PeriodIndex,
    PeriodSummary,
    Transaction,
)
from ledger_report.sources.base import TransactionSource

logger = get_logger(__name__)


def _widen(start: datetime, end: datetime, margin: timedelta) -> tuple[datetime, datetime]:
    try:
        start = start - margin
    except OverflowError:
        start = datetime.min
    try:
        end = end + margin
    except OverflowError:
        end = datetime.max
    return start, end


class LedgerReports:
    """Derived views over a transaction source.

    Each call reads a fresh snapshot from the source and builds new
    buckets; the instance itself holds no per-report state.
    """

    def __init__(self, source: TransactionSource, policies: ReportPolicies | None = None) -> None:
        self.source = source
        self.policies = policies or ReportPolicies()

    def _month(self, year: int, month: int, policy: ReportPolicy) -> list[Transaction]:
        """Rows of one month after ``policy`` is applied.

        Pairing sees ``policy.tolerance`` past both month edges, so a charge
        and a reversal on either side of midnight cancel out here exactly as
        they do in the all-time reports.
        """
        start, end = month_bounds(year, month)
        if policy.tolerance is not None:
            start, end = _widen(start, end, policy.tolerance)
        rows = apply_policy(self.source.fetch(start, end), policy)
        return filter_month(rows, year, month)

    def monthly_summaries(self) -> list[PeriodSummary]:
        """Income, expense and profit for every month, newest first."""
        rows = apply_policy(self.source.fetch(), self.policies.summary)
        buckets = bucket_by_month(rows)
        logger.debug("Built %d monthly buckets from %d transactions", len(buckets), len(rows))
        return monthly_records(buckets)

    def yearly_summaries(self) -> list[PeriodSummary]:
        """Income, expense and profit for every year, newest first."""
        rows = apply_policy(self.source.fetch(), self.policies.summary)
        return yearly_records(bucket_by_year(rows))

    def month_summary(self, year: int, month: int) -> PeriodSummary:
        """Summary of one month, zero-filled when the month has no rows."""
        rows = self._month(year, month, self.policies.summary)
        buckets = bucket_by_month(rows)
        return summary_record(buckets.get((year, month)), year, month)

    def daily_chart(
        self,
        year: int,
        month: int,
        measure: DailyMeasure | str = DailyMeasure.EXPENSE,
    ) -> list[DailyPoint]:
        """One point per calendar day of the month, ascending."""
        rows = self._month(year, month, self.policies.summary)
        return daily_points(bucket_by_day(rows, year, month), measure)

    def category_chart(self, year: int, month: int) -> list[CategoryShare]:
        """Expense total and share per category, largest first."""
        rows = self._month(year, month, self.policies.category)
        buckets = bucket_by_category(rows, self.policies.uncategorized_label)
        logger.debug("Built %d category buckets for %d-%02d", len(buckets), year, month)
        return category_shares(buckets)

    def transactions_for_month(self, year: int, month: int) -> list[Transaction]:
        """Cleaned transactions of a month, newest first."""
        rows = self._month(year, month, self.policies.listing)
        return sorted(rows, key=lambda tx: tx.operation_time, reverse=True)

    def available_periods(self) -> PeriodIndex:
        """Years and months that have any stored transaction, newest first."""
        periods: set[tuple[int, int]] = {
            (tx.operation_time.year, tx.operation_time.month) for tx in self.source.fetch()
        }
        index: PeriodIndex = {}
        for year, month in sorted(periods, reverse=True):
            index.setdefault(year, []).append(month)
        return index

    def transaction_by_id(self, transaction_id: str) -> Transaction:
        tx = self.source.get(transaction_id)
        if tx is None:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        return tx
