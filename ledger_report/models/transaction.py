"""Bank-card transaction model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ledger_report.exceptions import InvalidInputError
from ledger_report.models.enums import TransactionStatus


@dataclass(frozen=True)
class Transaction:
    """A single ledger row as supplied by a transaction source.

    ``amount`` is signed: positive values are inflows, negative values are
    outflows. It is always a ``Decimal`` so sums stay exact.

    ``status`` is a ``TransactionStatus`` for the known values, the provider's
    own string for anything else, or ``None`` when the column was NULL.
    """

    transaction_id: str
    operation_time: datetime
    amount: Decimal
    status: TransactionStatus | str | None
    description: str
    category: str | None = None
    override_category: str | None = None

    # Card statement details (optional)
    payment_time: datetime | None = None
    card_number: str | None = None
    currency: str = "RUB"
    payment_amount: Decimal | None = None
    payment_currency: str | None = None
    cashback: Decimal | None = None
    mcc: str | None = None
    bonuses: Decimal | None = None
    comment: str = ""

    def __post_init__(self) -> None:
        if not self.transaction_id:
            raise InvalidInputError("Transaction id must be non-empty")
        if not isinstance(self.operation_time, datetime):
            raise InvalidInputError(
                f"Transaction {self.transaction_id}: operation_time must be a datetime, "
                f"got {type(self.operation_time).__name__}"
            )
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise InvalidInputError(
                f"Transaction {self.transaction_id}: amount must be a finite Decimal, got {self.amount!r}"
            )
        if self.status is not None and not isinstance(self.status, str):
            raise InvalidInputError(
                f"Transaction {self.transaction_id}: status must be a string, got {self.status!r}"
            )

    @property
    def effective_category(self) -> str | None:
        """User-assigned category when present, otherwise the provider category."""
        if self.override_category is not None:
            return self.override_category
        return self.category

    @property
    def is_failed(self) -> bool:
        return self.status == TransactionStatus.FAILED

    @property
    def is_reportable(self) -> bool:
        """Rows with any status but FAILED are counted; a NULL status is not."""
        return self.status is not None and not self.is_failed

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0
