"""JSON file transaction source."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from ledger_report.exceptions import InvalidInputError, SourceError
from ledger_report.logging import get_logger
from ledger_report.models import Transaction
from ledger_report.sources.base import check_range, in_range
from ledger_report.sources.rows import transaction_from_row, transaction_to_row

logger = get_logger(__name__)


class JsonFileTransactionSource:
    """Read transactions from a JSON array of ledger rows.

    The file is read on every call, so edits show up in the next report.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize JSON file source.

        Parameters
        ----------
        path : str | Path
            JSON file holding a list of row objects.
        """
        self.path = Path(path)

    def _load_rows(self) -> list[dict[str, Any]]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise SourceError(f"Cannot read ledger file {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise SourceError(f"Invalid JSON in ledger file {self.path}: {e}") from e

        if not isinstance(data, list):
            raise InvalidInputError(f"Ledger file {self.path} must contain a JSON array")
        return data

    def _load(self) -> list[Transaction]:
        rows = self._load_rows()
        transactions = []
        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                raise InvalidInputError(f"Ledger file {self.path}: row {i} is not an object")
            transactions.append(transaction_from_row(row))
        logger.debug("Loaded %d transactions from %s", len(transactions), self.path)
        return transactions

    def fetch(self, start: datetime | None = None, end: datetime | None = None) -> list[Transaction]:
        check_range(start, end)
        return [tx for tx in self._load() if in_range(tx, start, end)]

    def get(self, transaction_id: str) -> Transaction | None:
        for tx in self._load():
            if tx.transaction_id == transaction_id:
                return tx
        return None

    @staticmethod
    def write(path: str | Path, transactions: list[Transaction], pretty: bool = False) -> Path:
        """Write transactions as a JSON ledger file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rows = [transaction_to_row(tx) for tx in transactions]
        with open(path, "w", encoding="utf-8") as f:
            if pretty:
                json.dump(rows, f, indent=2, ensure_ascii=False)
            else:
                json.dump(rows, f, ensure_ascii=False)
        return path
