#!/usr/bin/env python3
"""
done_reviews.py
---------------
Done-review bookkeeping for periodic notes.

A period is identified by its formatted file name under the granularity's
naming pattern ("2025-10-10", "2025-W01", "2025-10", "2025-Q4", "2025").
Marking a period done cascades to every enabled child granularity inside
it: marking 2024 done also marks its quarters, months, weeks and days.
Weeks are included by overlap, so marking December 2024 also marks
2025-W01 (Dec 30 - Jan 5).

State is persisted as YAML:

    daily:
      2024-12-17: true
    weekly:
      2024-W51: true

Notes that exist also get a frontmatter flag (default property ``done``)
so other tools can see the status.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

# --- Third party imports ---
import yaml

# --- Local imports ---
from perinotes.core.exceptions import ConfigurationError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.settings import PeriodicSettings
from perinotes.periods.granularity import SPECIFICITY_ORDER, Granularity, children
from perinotes.periods.period_calendar import end_of_period, generate_range, start_of_period
from perinotes.utils.formats import format_as_filename
from perinotes.utils.md import get_frontmatter_value, is_truthy_flag, set_frontmatter_value


@dataclass(frozen=True)
class DoneReviews:
    """Done identifiers per granularity. Treated as immutable."""

    reviews: Dict[Granularity, Dict[str, bool]] = field(
        default_factory=lambda: {g: {} for g in SPECIFICITY_ORDER}
    )

    def ids(self, granularity: Granularity) -> Dict[str, bool]:
        return self.reviews.get(granularity, {})

    def copy(self) -> "DoneReviews":
        return DoneReviews({g: dict(self.ids(g)) for g in SPECIFICITY_ORDER})

    def to_dict(self) -> Dict[str, Dict[str, bool]]:
        return {g.value: dict(sorted(self.ids(g).items())) for g in SPECIFICITY_ORDER}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Dict[str, bool]]]) -> "DoneReviews":
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Done reviews must be a mapping")
        reviews: Dict[Granularity, Dict[str, bool]] = {}
        for granularity in SPECIFICITY_ORDER:
            section = data.get(granularity.value) or {}
            if not isinstance(section, dict):
                raise ConfigurationError(f"Done reviews '{granularity.value}' must be a mapping")
            reviews[granularity] = {
                str(key): True for key, value in section.items() if is_truthy_flag(value)
            }
        return cls(reviews)


def period_identifier(
    value: date, granularity: Granularity, settings: PeriodicSettings
) -> str:
    """Formatted file name of the period containing ``value``."""
    pattern = settings.config(granularity).naming_pattern
    return format_as_filename(start_of_period(value, granularity), pattern)


def child_period_identifiers(
    value: date, granularity: Granularity, settings: PeriodicSettings
) -> Dict[Granularity, List[str]]:
    """
    Identifiers of the enabled child periods overlapping a parent period.

    Args:
        value: Any date in the parent period
        granularity: Parent granularity
        settings: Periodic settings (enabled flags and patterns)

    Returns:
        Mapping of child granularity (largest first) to identifiers
    """
    start = start_of_period(value, granularity)
    end = end_of_period(value, granularity)
    result: Dict[Granularity, List[str]] = {}
    for child in children(granularity):
        if not settings.config(child).enabled:
            continue
        result[child] = [
            period_identifier(d, child, settings) for d in generate_range(start, end, child)
        ]
    return result


def mark_period_with_cascade(
    reviews: DoneReviews,
    value: date,
    granularity: Granularity,
    settings: PeriodicSettings,
    is_done: bool,
) -> DoneReviews:
    """
    Mark a period and all its enabled children done (or not done).

    Returns a new DoneReviews; the input is left untouched.
    """
    updated = reviews.copy()

    targets = {granularity: [period_identifier(value, granularity, settings)]}
    targets.update(child_period_identifiers(value, granularity, settings))

    for target, identifiers in targets.items():
        section = updated.reviews[target]
        for identifier in identifiers:
            if is_done:
                section[identifier] = True
            else:
                section.pop(identifier, None)
    return updated


def is_period_done(
    reviews: DoneReviews,
    value: date,
    granularity: Granularity,
    settings: PeriodicSettings,
) -> bool:
    return reviews.ids(granularity).get(period_identifier(value, granularity, settings)) is True


# ----- Frontmatter mirror -----

def is_note_done(content: str, property_name: str = "done") -> bool:
    """Done flag of a note: True or "true" in its frontmatter."""
    return is_truthy_flag(get_frontmatter_value(content, property_name))


def set_note_done(content: str, is_done: bool, property_name: str = "done") -> str:
    return set_frontmatter_value(content, property_name, is_done)


# ----- Persistence -----

class DoneReviewsStore:
    """Load and save DoneReviews as a YAML file."""

    def __init__(self, path: Path, logger: Optional[PerinotesLogger] = None) -> None:
        self.path = Path(path)
        self.logger = safe_logger(logger)

    def load(self) -> DoneReviews:
        """
        Read the done reviews file; a missing file yields an empty state.

        Raises:
            ConfigurationError: If the file is not valid YAML
        """
        if not self.path.exists():
            return DoneReviews()
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.path}: {e}") from e
        return DoneReviews.from_dict(data)

    def save(self, reviews: DoneReviews) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(reviews.to_dict(), sort_keys=False), encoding="utf-8"
        )
        self.logger.log_operation(
            "save_done_reviews",
            {"path": self.path, "total": sum(len(reviews.ids(g)) for g in SPECIFICITY_ORDER)},
        )
