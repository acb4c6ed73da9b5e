"""Custom exception hierarchy for ledger-report."""


class LedgerReportError(Exception):
    """Base exception for all ledger-report errors."""


class InvalidInputError(LedgerReportError):
    """Raised when a transaction, period or parameter is malformed."""


class TransactionNotFoundError(LedgerReportError):
    """Raised when a referenced transaction does not exist."""


class ConfigurationError(LedgerReportError):
    """Raised when configuration is invalid or missing."""


class SourceError(LedgerReportError):
    """Raised when a transaction source fails to read."""
