"""Ledger normalization and aggregation engine."""

from ledger_report.engine.bucketing import (
    ReportBucket,
    apply_policy,
    bucket_by,
    bucket_by_category,
    bucket_by_day,
    bucket_by_month,
    bucket_by_year,
    days_in_month,
    filter_month,
    month_bounds,
)
from ledger_report.engine.dedup import find_offsetting, remove_offsetting_pairs
from ledger_report.engine.formatting import (
    category_shares,
    daily_points,
    format_percentage,
    monthly_records,
    quantize_money,
    summary_record,
    yearly_records,
)
from ledger_report.engine.policy import ReportPolicies, ReportPolicy

__all__ = [
    "ReportBucket",
    "ReportPolicies",
    "ReportPolicy",
    "apply_policy",
    "bucket_by",
    "bucket_by_category",
    "bucket_by_day",
    "bucket_by_month",
    "bucket_by_year",
    "category_shares",
    "daily_points",
    "days_in_month",
    "filter_month",
    "find_offsetting",
    "format_percentage",
    "month_bounds",
    "monthly_records",
    "quantize_money",
    "remove_offsetting_pairs",
    "summary_record",
    "yearly_records",
]
