"""Ledger domain models."""

from ledger_report.models.enums import DailyMeasure, TransactionStatus
from ledger_report.models.report import (
    CategoryDetail,
    CategoryShare,
    DailyPoint,
    PeriodIndex,
    PeriodSummary,
)
from ledger_report.models.transaction import Transaction

__all__ = [
    "CategoryDetail",
    "CategoryShare",
    "DailyMeasure",
    "DailyPoint",
    "PeriodIndex",
    "PeriodSummary",
    "Transaction",
    "TransactionStatus",
]
