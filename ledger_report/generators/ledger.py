"""Sample bank-card ledger generator."""

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from ledger_report.engine.policy import DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS
from ledger_report.generators.base import BaseGenerator
from ledger_report.models import Transaction, TransactionStatus


class LedgerGenerator(BaseGenerator):
    """Generate a realistic card ledger with reversals, failures and transfers."""

    # (category, mcc, weight)
    EXPENSE_CATEGORIES = [
        ("Супермаркеты", "5411", 0.35),
        ("Рестораны", "5812", 0.15),
        ("Фастфуд", "5814", 0.10),
        ("Транспорт", "4121", 0.12),
        ("Аптеки", "5912", 0.06),
        ("Одежда и обувь", "5651", 0.07),
        ("Связь", "4814", 0.05),
        ("Развлечения", "7832", 0.10),
    ]

    INCOME_CATEGORY = "Пополнения"
    TRANSFER_DESCRIPTIONS = sorted(DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS)

    def __init__(self, seed: int | None = None, locale: str = "ru_RU") -> None:
        super().__init__(seed, locale)
        self.card_number = f"*{self.rng.randint(0, 9999):04d}"
        self._categories = [c for c, _, _ in self.EXPENSE_CATEGORIES]
        self._mcc = {c: mcc for c, mcc, _ in self.EXPENSE_CATEGORIES}
        self._weights = [w for _, _, w in self.EXPENSE_CATEGORIES]

    def _amount(self, scale: float, cap: float) -> Decimal:
        # Pareto: many small purchases, a few large ones
        amount = min(self.rng.paretovariate(1.5) * scale, cap)
        return Decimal(str(round(amount, 2)))

    def _id(self) -> str:
        return self.fake.uuid4()

    def generate_expense(self, operation_time: datetime) -> Transaction:
        """Generate a card purchase."""
        category = self.rng.choices(self._categories, weights=self._weights, k=1)[0]
        amount = -self._amount(300, 50000)
        return Transaction(
            transaction_id=self._id(),
            operation_time=operation_time,
            amount=amount,
            status=TransactionStatus.OK,
            description=self.fake.company(),
            category=category,
            payment_time=operation_time + timedelta(days=self.rng.randint(0, 2)),
            card_number=self.card_number,
            payment_amount=amount,
            payment_currency="RUB",
            cashback=(abs(amount) / 100).quantize(Decimal("1")) if self.rng.random() < 0.3 else None,
            mcc=self._mcc[category],
        )

    def generate_income(self, operation_time: datetime) -> Transaction:
        """Generate an incoming transfer (salary, refund from a friend...)."""
        amount = self._amount(5000, 300000)
        return Transaction(
            transaction_id=self._id(),
            operation_time=operation_time,
            amount=amount,
            status=TransactionStatus.OK,
            description=f"Перевод от {self.fake.name()}",
            category=self.INCOME_CATEGORY,
            payment_time=operation_time,
            card_number=self.card_number,
            payment_amount=amount,
            payment_currency="RUB",
        )

    def generate_transfer(self, operation_time: datetime) -> Transaction:
        """Generate a movement between the owner's own accounts."""
        amount = self._amount(2000, 100000)
        if self.rng.random() < 0.5:
            amount = -amount
        return Transaction(
            transaction_id=self._id(),
            operation_time=operation_time,
            amount=amount,
            status=TransactionStatus.OK,
            description=self.rng.choice(self.TRANSFER_DESCRIPTIONS),
            category="Переводы",
            card_number=self.card_number,
        )

    def generate_reversal(self, original: Transaction, delay: timedelta) -> Transaction:
        """Generate the cancellation of ``original`` after ``delay``."""
        return Transaction(
            transaction_id=self._id(),
            operation_time=original.operation_time + delay,
            amount=-original.amount,
            status=TransactionStatus.OK,
            description=original.description,
            category=original.category,
            card_number=original.card_number,
            mcc=original.mcc,
        )

    def generate_for_period(
        self,
        start_date: datetime,
        end_date: datetime,
        avg_transactions_per_day: float = 3.0,
        income_rate: float = 0.05,
        transfer_rate: float = 0.03,
        reversal_rate: float = 0.02,
        failed_rate: float = 0.02,
    ) -> Iterator[Transaction]:
        """Generate transactions day by day over ``[start_date, end_date)``.

        Yields
        ------
        Transaction
            Rows in chronological order of their primary event; a reversal
            follows the purchase it cancels.
        """
        current_date = start_date.replace(hour=0, minute=0, second=0, microsecond=0)

        while current_date < end_date:
            num_transactions = max(0, int(self.rng.expovariate(1 / avg_transactions_per_day)))

            for _ in range(num_transactions):
                timestamp = current_date.replace(
                    hour=self._weighted_hour(),
                    minute=self.rng.randint(0, 59),
                    second=self.rng.randint(0, 59),
                )
                if timestamp >= end_date or timestamp < start_date:
                    continue

                roll = self.rng.random()
                if roll < income_rate:
                    yield self.generate_income(timestamp)
                    continue
                if roll < income_rate + transfer_rate:
                    yield self.generate_transfer(timestamp)
                    continue

                tx = self.generate_expense(timestamp)
                if self.rng.random() < failed_rate:
                    tx = replace(tx, status=TransactionStatus.FAILED)
                yield tx

                if not tx.is_failed and self.rng.random() < reversal_rate:
                    delay = timedelta(minutes=self.rng.randint(1, 20))
                    yield self.generate_reversal(tx, delay)

            current_date += timedelta(days=1)

    def _weighted_hour(self) -> int:
        """Generate hour weighted toward daytime."""
        if self.rng.random() < 0.8:
            return self.rng.randint(9, 21)
        return self.rng.choice(list(range(0, 9)) + list(range(22, 24)))
