#!/usr/bin/env python3
"""
selection.py
------------
Hierarchical period selection.

A SelectionContext records what the user picked at each level (a year, and
optionally a quarter, a month, an ISO week, a day). Candidate periods for a
granularity are bounded by the most specific *enabled* ancestor that has a
concrete selection:

    weekly candidates, monthly enabled and February 2024 selected
        → the five ISO weeks overlapping February 2024

Disabled ancestors are never consulted. Their scope is still implied when an
enabled, more specific ancestor is selected, since a month selection carries
its year.

When no enabled ancestor has a selection, a bounded default window around
today is used instead so candidate lists never grow without limit.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Collection, Dict, Iterable, List, Optional, Tuple, TypeVar

# --- Local imports ---
from perinotes.core.exceptions import ConfigurationError
from perinotes.periods.granularity import Granularity, parents
from perinotes.periods.period_calendar import (
    as_date,
    end_of_period,
    generate_range,
    iso_week_start,
    periods_overlap,
    previous_period,
    quarter_of,
    start_of_period,
    weeks_in_iso_year,
)

DateRange = Tuple[date, date]
T = TypeVar("T")


@dataclass
class SelectionContext:
    """
    Partial hierarchical selection.

    Attributes:
        selected_year: Calendar year (always set)
        selected_quarter: Quarter 1-4, or None
        selected_month: Month 0-11 (January is 0), or None
        selected_week: ISO week number, or None
        selected_week_year: ISO week-year of selected_week, or None
        selected_day: Selected day, or None
        existence: Whether the selected period of each granularity has a note
    """

    selected_year: int = field(default_factory=lambda: date.today().year)
    selected_quarter: Optional[int] = None
    selected_month: Optional[int] = None
    selected_week: Optional[int] = None
    selected_week_year: Optional[int] = None
    selected_day: Optional[date] = None
    existence: Dict[Granularity, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check ranges and that child selections agree with the year.

        Raises:
            ConfigurationError: On an out-of-range or inconsistent selection
        """
        if self.selected_quarter is not None and not 1 <= self.selected_quarter <= 4:
            raise ConfigurationError(
                f"selected_quarter must be between 1 and 4, got {self.selected_quarter}"
            )
        if self.selected_month is not None and not 0 <= self.selected_month <= 11:
            raise ConfigurationError(
                f"selected_month must be between 0 and 11, got {self.selected_month}"
            )
        if (
            self.selected_quarter is not None
            and self.selected_month is not None
            and self.selected_month // 3 + 1 != self.selected_quarter
        ):
            raise ConfigurationError(
                f"month {self.selected_month} is not in quarter {self.selected_quarter}"
            )
        if (self.selected_week is None) != (self.selected_week_year is None):
            raise ConfigurationError(
                "selected_week and selected_week_year must be set together"
            )
        if self.selected_week is not None and self.selected_week_year is not None:
            last_week = weeks_in_iso_year(self.selected_week_year)
            if not 1 <= self.selected_week <= last_week:
                raise ConfigurationError(
                    f"week {self.selected_week} does not exist in {self.selected_week_year}"
                )
            monday = iso_week_start(self.selected_week_year, self.selected_week)
            if not periods_overlap(
                monday,
                Granularity.WEEKLY,
                date(self.selected_year, 1, 1),
                date(self.selected_year, 12, 31),
            ):
                raise ConfigurationError(
                    f"week {self.selected_week_year}-W{self.selected_week:02d} "
                    f"is outside year {self.selected_year}"
                )
        if self.selected_day is not None and self.selected_day.year != self.selected_year:
            raise ConfigurationError(
                f"day {self.selected_day} is outside year {self.selected_year}"
            )

    # ----- Existence flags -----

    def exists(self, granularity: Granularity) -> bool:
        if granularity is Granularity.DAILY:
            return True
        return self.existence.get(granularity, False)

    def set_exists(self, granularity: Granularity, exists: bool) -> None:
        if granularity is not Granularity.DAILY:
            self.existence[granularity] = exists

    # ----- Updates -----

    def update_for_period(
        self, granularity: Granularity, value: date, exists: bool
    ) -> None:
        """
        Select a period and clear every selection below it.

        Quarter, month and day selections also move the year, since they
        cannot straddle one. A week keeps the current year and month.
        """
        value = as_date(value)
        if granularity is Granularity.YEARLY:
            self.selected_year = value.year
            self._clear_below(Granularity.YEARLY)
        elif granularity is Granularity.QUARTERLY:
            self.selected_year = value.year
            self.selected_quarter = quarter_of(value)
            self._clear_below(Granularity.QUARTERLY)
        elif granularity is Granularity.MONTHLY:
            self.selected_year = value.year
            self.selected_quarter = quarter_of(value) if self.selected_quarter else None
            self.selected_month = value.month - 1
            self._clear_below(Granularity.MONTHLY)
        elif granularity is Granularity.WEEKLY:
            self.selected_week_year, self.selected_week, _ = value.isocalendar()
            self.selected_day = None
        else:
            self.selected_year = value.year
            self.selected_day = value
        self.set_exists(granularity, exists)

    def update_parent_context(
        self, granularity: Granularity, value: date, exists: bool
    ) -> None:
        """Select a period without clearing selections below it."""
        value = as_date(value)
        if granularity is Granularity.YEARLY:
            self.selected_year = value.year
        elif granularity is Granularity.QUARTERLY:
            self.selected_quarter = quarter_of(value)
        elif granularity is Granularity.MONTHLY:
            self.selected_month = value.month - 1
        elif granularity is Granularity.WEEKLY:
            self.selected_week_year, self.selected_week, _ = value.isocalendar()
        else:
            self.selected_day = value
        self.set_exists(granularity, exists)

    def _clear_below(self, granularity: Granularity) -> None:
        if granularity.specificity < Granularity.QUARTERLY.specificity:
            self.selected_quarter = None
            self.existence.pop(Granularity.QUARTERLY, None)
        if granularity.specificity < Granularity.MONTHLY.specificity:
            self.selected_month = None
            self.existence.pop(Granularity.MONTHLY, None)
        if granularity.specificity < Granularity.WEEKLY.specificity:
            self.selected_week = None
            self.selected_week_year = None
            self.existence.pop(Granularity.WEEKLY, None)
        self.selected_day = None


def selected_range(
    granularity: Granularity, context: SelectionContext
) -> Optional[DateRange]:
    """
    Date range of the context's selection at one level, or None if unselected.

    The year is always selected; the other levels only when set.
    """
    year = context.selected_year
    if granularity is Granularity.YEARLY:
        return date(year, 1, 1), date(year, 12, 31)
    if granularity is Granularity.QUARTERLY and context.selected_quarter is not None:
        start = date(year, 3 * context.selected_quarter - 2, 1)
        return start, end_of_period(start, Granularity.QUARTERLY)
    if granularity is Granularity.MONTHLY and context.selected_month is not None:
        start = date(year, context.selected_month + 1, 1)
        return start, end_of_period(start, Granularity.MONTHLY)
    if (
        granularity is Granularity.WEEKLY
        and context.selected_week is not None
        and context.selected_week_year is not None
    ):
        start = iso_week_start(context.selected_week_year, context.selected_week)
        return start, start + timedelta(days=6)
    if granularity is Granularity.DAILY and context.selected_day is not None:
        return context.selected_day, context.selected_day
    return None


def selection_scope(
    granularity: Granularity,
    context: SelectionContext,
    enabled: Collection[Granularity],
) -> Optional[Tuple[Granularity, DateRange]]:
    """
    The nearest enabled ancestor with a selection, and its date range.

    Ancestors are checked from most to least specific; the first one that is
    both enabled and selected wins.

    Returns:
        (ancestor, (start, end)) or None when no enabled ancestor is selected
    """
    for ancestor in parents(granularity):
        if ancestor not in enabled:
            continue
        bounds = selected_range(ancestor, context)
        if bounds is not None:
            return ancestor, bounds
    return None


def default_window(granularity: Granularity, today: Optional[date] = None) -> DateRange:
    """
    Fallback candidate window when no enabled ancestor is selected.

    - yearly, quarterly: the current year and the five before it
    - monthly: the previous and current year
    - weekly: from the first of the month two months back through today
    - daily: the last 14 days through today
    """
    today = today or date.today()
    if granularity in (Granularity.YEARLY, Granularity.QUARTERLY):
        return date(today.year - 5, 1, 1), date(today.year, 12, 31)
    if granularity is Granularity.MONTHLY:
        return date(today.year - 1, 1, 1), date(today.year, 12, 31)
    if granularity is Granularity.WEEKLY:
        return previous_period(today, Granularity.MONTHLY, 2), today
    return today - timedelta(days=14), today


def generate_candidates(
    granularity: Granularity,
    context: SelectionContext,
    enabled: Collection[Granularity],
    today: Optional[date] = None,
) -> List[date]:
    """
    Candidate period starts for a granularity under a selection.

    Args:
        granularity: Requested granularity
        context: Current selection
        enabled: Enabled granularities
        today: Reference day for the fallback window

    Returns:
        Ascending period starts; empty when the scope is empty

    Examples:
        >>> ctx = SelectionContext(selected_year=2024, selected_month=1)
        >>> enabled = {Granularity.YEARLY, Granularity.MONTHLY, Granularity.WEEKLY}
        >>> [d.isoformat() for d in generate_candidates(Granularity.WEEKLY, ctx, enabled)]
        ['2024-01-29', '2024-02-05', '2024-02-12', '2024-02-19', '2024-02-26']
    """
    scope = selection_scope(granularity, context, enabled)
    if scope is None:
        start, end = default_window(granularity, today)
    else:
        ancestor, (start, end) = scope
        if granularity is Granularity.DAILY and ancestor is Granularity.YEARLY:
            # Days under a selected year: first month only
            end = end_of_period(start, Granularity.MONTHLY)
    return generate_range(start, end, granularity)


def is_in_context(
    value: date,
    granularity: Granularity,
    context: SelectionContext,
    visible: Collection[Granularity],
) -> bool:
    """
    Whether an existing note's period falls inside the selection.

    Uses the same ancestor cascade as generate_candidates, with overlap so
    boundary weeks belong to both neighbouring months. Only visible
    ancestors filter.
    """
    scope = selection_scope(granularity, context, visible)
    if scope is None:
        return True
    _, (start, end) = scope
    return periods_overlap(start_of_period(value, granularity), granularity, start, end)


def filter_by_context(
    items: Iterable[T],
    granularity: Granularity,
    context: SelectionContext,
    visible: Collection[Granularity],
    date_of: Callable[[T], Optional[date]],
) -> List[T]:
    """
    Keep the items whose period lies inside the selection.

    Items whose date cannot be determined are dropped.
    """
    kept: List[T] = []
    for item in items:
        value = date_of(item)
        if value is not None and is_in_context(value, granularity, context, visible):
            kept.append(item)
    return kept
