"""Per-report exclusion and pairing policy."""

from dataclasses import dataclass, field
from datetime import timedelta

DEFAULT_TOLERANCE = timedelta(minutes=30)

# Internal transfers and deposit closures move money between the owner's own
# accounts and are not income or spending.
DEFAULT_EXCLUDED_DESCRIPTIONS: frozenset[str] = frozenset(
    {
        "Перевод между счетами",
        "Закрытие вклада Тинькофф Банк",
    }
)

# Self-transfers and deposit top-ups are outflows that are not spending.
DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS: frozenset[str] = DEFAULT_EXCLUDED_DESCRIPTIONS | {
    "Перевод по запросу самому себе",
    "Пополнение вклада",
}


@dataclass(frozen=True)
class ReportPolicy:
    """Which rows a report ignores and how offsetting pairs are detected.

    Parameters
    ----------
    tolerance : timedelta | None
        Maximum time between two opposite amounts for them to count as an
        offsetting pair. ``None`` disables pairing.
    excluded_descriptions : frozenset[str]
        Description literals dropped before bucketing.
    """

    tolerance: timedelta | None = DEFAULT_TOLERANCE
    excluded_descriptions: frozenset[str] = DEFAULT_EXCLUDED_DESCRIPTIONS


@dataclass(frozen=True)
class ReportPolicies:
    """Policy per report type."""

    summary: ReportPolicy = field(default_factory=ReportPolicy)
    listing: ReportPolicy = field(default_factory=ReportPolicy)
    category: ReportPolicy = field(
        default_factory=lambda: ReportPolicy(excluded_descriptions=DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS)
    )
    uncategorized_label: str = "Uncategorized"

    @classmethod
    def uniform(
        cls,
        tolerance: timedelta | None = DEFAULT_TOLERANCE,
        excluded_descriptions: frozenset[str] = DEFAULT_EXCLUDED_DESCRIPTIONS,
        category_excluded_descriptions: frozenset[str] = DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS,
    ) -> "ReportPolicies":
        """Build policies sharing one tolerance window."""
        base = ReportPolicy(tolerance=tolerance, excluded_descriptions=frozenset(excluded_descriptions))
        return cls(
            summary=base,
            listing=base,
            category=ReportPolicy(
                tolerance=tolerance,
                excluded_descriptions=frozenset(category_excluded_descriptions),
            ),
        )
