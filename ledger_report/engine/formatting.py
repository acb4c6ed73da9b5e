"""Presentation mapping from buckets to report records.

Nothing here re-derives a sum; values come straight from the buckets and
are rounded once, to two places, on the way out.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from ledger_report.engine.bucketing import ReportBucket
from ledger_report.exceptions import InvalidInputError
from ledger_report.models import (
    CategoryDetail,
    CategoryShare,
    DailyMeasure,
    DailyPoint,
    PeriodSummary,
)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
    """Round to two decimal places, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_percentage(part: Decimal, whole: Decimal) -> str:
    """Return ``part`` as a share of ``whole`` like ``"12.34%"``.

    A zero ``whole`` yields ``"0.00%"``.
    """
    if whole == 0:
        return f"{quantize_money(Decimal(0))}%"
    return f"{quantize_money(part / whole * HUNDRED)}%"


def summary_record(bucket: ReportBucket | None, year: int, month: int | None) -> PeriodSummary:
    """Build a period summary; a missing bucket gives a zero-filled record."""
    if bucket is None:
        bucket = ReportBucket(key=(year, month))
    return PeriodSummary(
        year=year,
        month=month,
        total_income=quantize_money(bucket.total_income),
        total_expense=quantize_money(bucket.expense_magnitude),
        net_profit=quantize_money(bucket.net_amount),
    )


def monthly_records(buckets: Mapping[tuple[int, int], ReportBucket]) -> list[PeriodSummary]:
    return [summary_record(bucket, year, month) for (year, month), bucket in buckets.items()]


def yearly_records(buckets: Mapping[int, ReportBucket]) -> list[PeriodSummary]:
    return [summary_record(bucket, year, None) for year, bucket in buckets.items()]


def daily_points(
    buckets: Mapping[int, ReportBucket],
    measure: DailyMeasure | str = DailyMeasure.EXPENSE,
) -> list[DailyPoint]:
    """Map day buckets to chart points in ascending day order."""
    try:
        measure = DailyMeasure(measure)
    except ValueError as e:
        raise InvalidInputError(
            f"Unknown daily measure {measure!r}; expected one of {[m.value for m in DailyMeasure]}"
        ) from e

    points = []
    for day in sorted(buckets):
        bucket = buckets[day]
        if measure == DailyMeasure.EXPENSE:
            value = bucket.expense_magnitude
        elif measure == DailyMeasure.INCOME:
            value = bucket.total_income
        else:
            value = bucket.net_amount
        points.append(DailyPoint(day=day, value=quantize_money(value)))
    return points


def category_shares(buckets: Mapping[str, ReportBucket]) -> list[CategoryShare]:
    """Map category buckets to chart records, keeping bucket order."""
    total_expense = sum((b.expense_magnitude for b in buckets.values()), Decimal(0))

    shares = []
    for name, bucket in buckets.items():
        details = tuple(
            CategoryDetail(
                transaction_id=tx.transaction_id,
                category=name,
                amount=quantize_money(abs(tx.amount)),
                description=tx.description,
            )
            for tx in bucket.transactions
        )
        shares.append(
            CategoryShare(
                name=name,
                total=quantize_money(bucket.expense_magnitude),
                percentage=format_percentage(bucket.expense_magnitude, total_expense),
                transactions=details,
            )
        )
    return shares
