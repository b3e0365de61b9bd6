"""
Granularity
-----------

The five nested period types, ordered by specificity:

    yearly ⊇ quarterly ⊇ monthly ⊇ weekly ⊇ daily

Weeks are ISO weeks (Monday start), so a week may straddle two months,
two quarters or two years; nesting is by overlap, not containment.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import Iterable, List

# --- Local imports ---
from perinotes.core.exceptions import ConfigurationError


class Granularity(str, Enum):
    """
    Enumeration of period granularities.
    - DAILY: One calendar day
    - WEEKLY: One ISO week, Monday through Sunday
    - MONTHLY: One calendar month
    - QUARTERLY: Three calendar months starting January, April, July, October
    - YEARLY: One calendar year
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available granularity choices."""
        return [g.value for g in cls]

    @classmethod
    def parse(cls, value: "str | Granularity") -> "Granularity":
        """
        Convert a string to a Granularity.

        Raises:
            ConfigurationError: If the name is unknown
        """
        if isinstance(value, Granularity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigurationError(f"Unknown granularity: '{value}'") from e

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.value.title()

    @property
    def unit_name(self) -> str:
        """Singular period noun ('day', 'week', ...)."""
        return {
            Granularity.DAILY: "day",
            Granularity.WEEKLY: "week",
            Granularity.MONTHLY: "month",
            Granularity.QUARTERLY: "quarter",
            Granularity.YEARLY: "year",
        }[self]

    @property
    def specificity(self) -> int:
        """0 for yearly up to 4 for daily."""
        return SPECIFICITY_ORDER.index(self)

    def is_more_specific_than(self, other: "Granularity") -> bool:
        return self.specificity > other.specificity


# Least specific first
SPECIFICITY_ORDER: List[Granularity] = [
    Granularity.YEARLY,
    Granularity.QUARTERLY,
    Granularity.MONTHLY,
    Granularity.WEEKLY,
    Granularity.DAILY,
]


def parents(granularity: Granularity) -> List[Granularity]:
    """
    Ancestors of a granularity, nearest (most specific) first.

    Examples:
        >>> parents(Granularity.WEEKLY)
        [<Granularity.MONTHLY: 'monthly'>, <Granularity.QUARTERLY: 'quarterly'>, <Granularity.YEARLY: 'yearly'>]
    """
    return list(reversed(SPECIFICITY_ORDER[: granularity.specificity]))


def children(granularity: Granularity) -> List[Granularity]:
    """Descendants of a granularity, largest first."""
    return SPECIFICITY_ORDER[granularity.specificity + 1 :]


def parse_granularities(values: Iterable["str | Granularity"]) -> List[Granularity]:
    """Parse a collection of names, keeping specificity order and dropping repeats."""
    wanted = {Granularity.parse(v) for v in values}
    return [g for g in SPECIFICITY_ORDER if g in wanted]
