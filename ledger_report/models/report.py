"""Report records returned to the presentation layer."""

from dataclasses import dataclass, field
from decimal import Decimal

# year -> months, both in descending order
PeriodIndex = dict[int, list[int]]


@dataclass(frozen=True)
class PeriodSummary:
    """Income, expense and profit for a year or a (year, month).

    ``total_expense`` is a non-negative magnitude, so
    ``net_profit == total_income - total_expense``.
    """

    year: int
    month: int | None
    total_income: Decimal
    total_expense: Decimal
    net_profit: Decimal


@dataclass(frozen=True)
class DailyPoint:
    """One day of a month chart."""

    day: int
    value: Decimal


@dataclass(frozen=True)
class CategoryDetail:
    """Drill-down row for a category chart."""

    transaction_id: str
    category: str
    amount: Decimal
    description: str


@dataclass(frozen=True)
class CategoryShare:
    """A category's expense total and its share of all expenses."""

    name: str
    total: Decimal
    percentage: str
    transactions: tuple[CategoryDetail, ...] = field(default_factory=tuple)
