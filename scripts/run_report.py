#!/usr/bin/env python3
"""Run a ledger report and print it as JSON.

Reads transactions from a JSON ledger file (``--json`` or
``LEDGER_JSON_PATH``) or from PostgreSQL (``POSTGRES_*`` variables or
``--postgres-url``).
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ledger_report.config import LedgerReportConfig
from ledger_report.exceptions import ConfigurationError, LedgerReportError
from ledger_report.logging import get_logger, setup_logging
from ledger_report.models import DailyMeasure
from ledger_report.reports import LedgerReports
from ledger_report.serialization import serialize_value
from ledger_report.sources import JsonFileTransactionSource, PostgresTransactionSource

logger = get_logger(__name__)

MONTH_REPORTS = ("month", "daily", "categories", "transactions")


def run_report(reports: LedgerReports, args: argparse.Namespace) -> object:
    """Dispatch to the requested report."""
    if args.report == "monthly":
        return reports.monthly_summaries()
    if args.report == "yearly":
        return reports.yearly_summaries()
    if args.report == "periods":
        return reports.available_periods()
    if args.report == "transaction":
        return reports.transaction_by_id(args.id)
    if args.report == "month":
        return reports.month_summary(args.year, args.month)
    if args.report == "daily":
        return reports.daily_chart(args.year, args.month, args.measure)
    if args.report == "categories":
        return reports.category_chart(args.year, args.month)
    return reports.transactions_for_month(args.year, args.month)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Print a ledger report as JSON")
    parser.add_argument(
        "report",
        choices=["monthly", "yearly", "periods", "transaction", *MONTH_REPORTS],
        help="Report to run",
    )
    parser.add_argument("--year", type=int, help="Year for month reports")
    parser.add_argument("--month", type=int, help="Month (1-12) for month reports")
    parser.add_argument("--id", help="Transaction id for the 'transaction' report")
    parser.add_argument(
        "--measure",
        choices=[m.value for m in DailyMeasure],
        default=DailyMeasure.EXPENSE.value,
        help="Value plotted by the daily chart (default: expense)",
    )
    parser.add_argument("--json", type=Path, default=None, help="JSON ledger file")
    parser.add_argument("--postgres-url", type=str, default=None, help="PostgreSQL connection string")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")

    args = parser.parse_args()

    try:
        config = LedgerReportConfig.from_env()
    except ConfigurationError as e:
        parser.error(str(e))
    setup_logging(config.log_level, config.log_format)

    if args.report in MONTH_REPORTS and (args.year is None or args.month is None):
        parser.error(f"--year and --month are required for '{args.report}'")
    if args.report == "transaction" and not args.id:
        parser.error("--id is required for 'transaction'")

    json_path = args.json or config.json_ledger_path
    if json_path is not None:
        source = JsonFileTransactionSource(json_path)
        logger.info("Source: %s", json_path)
    else:
        source = PostgresTransactionSource(
            args.postgres_url or config.postgres.connection_string,
            schema=config.postgres.schema,
        )
        logger.info("Source: PostgreSQL %s:%d/%s", config.postgres.host, config.postgres.port, config.postgres.database)

    reports = LedgerReports(source, config.policies)
    try:
        result = run_report(reports, args)
    except LedgerReportError as e:
        logger.error("%s failed: %s", args.report, e)
        sys.exit(1)

    print(json.dumps(serialize_value(result), indent=2 if args.pretty else None, ensure_ascii=False))


if __name__ == "__main__":
    main()
