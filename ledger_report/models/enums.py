"""Enumeration types for ledger entities."""

from enum import Enum


class TransactionStatus(str, Enum):
    OK = "OK"
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    FAILED = "FAILED"


class DailyMeasure(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"
    NET = "net"
