"""Transaction sources feeding the report engine."""

from ledger_report.sources.base import TransactionSource
from ledger_report.sources.json_file import JsonFileTransactionSource
from ledger_report.sources.memory import InMemoryTransactionSource
from ledger_report.sources.postgres import PostgresTransactionSource
from ledger_report.sources.rows import transaction_from_row, transaction_to_row

__all__ = [
    "InMemoryTransactionSource",
    "JsonFileTransactionSource",
    "PostgresTransactionSource",
    "TransactionSource",
    "transaction_from_row",
    "transaction_to_row",
]
