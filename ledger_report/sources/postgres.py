"""PostgreSQL transaction source."""

from datetime import datetime

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from ledger_report.exceptions import SourceError
from ledger_report.logging import get_logger
from ledger_report.models import Transaction
from ledger_report.sources.base import check_range
from ledger_report.sources.rows import COLUMNS, transaction_from_row

logger = get_logger(__name__)


class PostgresTransactionSource:
    """Read transactions from the ``transactions`` table.

    A connection is opened per call; nothing is shared between reports.
    """

    def __init__(self, connection_string: str, schema: str = "dbo", table: str = "transactions") -> None:
        """Initialize PostgreSQL source.

        Parameters
        ----------
        connection_string : str
            libpq connection string or URL.
        schema : str
            Schema holding the table.
        table : str
            Table name.
        """
        self.connection_string = connection_string
        self.schema = schema
        self.table = table

    def _select(self) -> sql.Composed:
        return sql.SQL("SELECT {columns} FROM {table}").format(
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in COLUMNS),
            table=sql.Identifier(self.schema, self.table),
        )

    def _query(self, query: sql.Composable, params: dict) -> list[Transaction]:
        try:
            with psycopg.connect(self.connection_string, row_factory=dict_row) as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise SourceError(f"Failed to read {self.schema}.{self.table}: {e}") from e

        logger.debug("Fetched %d rows from %s.%s", len(rows), self.schema, self.table)
        return [transaction_from_row(row) for row in rows]

    def fetch(self, start: datetime | None = None, end: datetime | None = None) -> list[Transaction]:
        """Get transactions in ``[start, end)``, oldest first."""
        check_range(start, end)

        conditions = []
        params: dict = {}
        if start is not None:
            conditions.append(sql.SQL("{} >= %(start)s").format(sql.Identifier("date_of_operation")))
            params["start"] = start
        if end is not None:
            conditions.append(sql.SQL("{} < %(end)s").format(sql.Identifier("date_of_operation")))
            params["end"] = end

        query = self._select()
        if conditions:
            query = sql.SQL("{} WHERE {}").format(query, sql.SQL(" AND ").join(conditions))
        query = sql.SQL("{} ORDER BY {}").format(query, sql.Identifier("date_of_operation"))
        return self._query(query, params)

    def get(self, transaction_id: str) -> Transaction | None:
        query = sql.SQL("{} WHERE {} = %(id)s").format(self._select(), sql.Identifier("transaction_id"))
        rows = self._query(query, {"id": transaction_id})
        return rows[0] if rows else None
