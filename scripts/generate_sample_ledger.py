#!/usr/bin/env python3
"""Generate a sample card ledger as a JSON file.

The file can be fed to ``scripts/run_report.py --json`` to try every
report without a database.
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ledger_report.generators import LedgerGenerator
from ledger_report.logging import get_logger, setup_logging
from ledger_report.sources import JsonFileTransactionSource

logger = get_logger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample card ledger")
    parser.add_argument(
        "--start",
        type=datetime.fromisoformat,
        default=datetime(datetime.now().year, 1, 1),
        help="First day (ISO date, default: January 1 of this year)",
    )
    parser.add_argument(
        "--end",
        type=datetime.fromisoformat,
        default=None,
        help="Day after the last day (ISO date, default: now)",
    )
    parser.add_argument(
        "--per-day",
        type=float,
        default=3.0,
        help="Average transactions per day (default: 3)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/ledger.json"),
        help="Output file (default: output/ledger.json)",
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")

    args = parser.parse_args()
    setup_logging(args.log_level)

    end = args.end or datetime.now()
    if args.start >= end:
        parser.error("--start must be before --end")

    generator = LedgerGenerator(seed=args.seed)
    transactions = list(
        generator.generate_for_period(args.start, end, avg_transactions_per_day=args.per_day)
    )

    path = JsonFileTransactionSource.write(args.output, transactions, pretty=args.pretty)
    failed = sum(1 for tx in transactions if tx.is_failed)
    logger.info("Wrote %d transactions (%d failed) to %s", len(transactions), failed, path)


if __name__ == "__main__":
    main()
