"""Sample ledger generators."""

from ledger_report.generators.ledger import LedgerGenerator

__all__ = ["LedgerGenerator"]
