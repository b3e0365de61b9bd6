#!/usr/bin/env python3
"""
period_calendar.py
------------------
Pure date arithmetic over the five period granularities.

All functions work at day resolution on ``datetime.date`` values
(``datetime`` inputs are truncated to their date). The "end" of a period is
its last day. Weeks are ISO weeks: they start on Monday and belong to the
ISO week-year, so 2024-12-30 starts week 1 of 2025.

Stepping is always computed from the normalized period start using integer
month arithmetic, so iterating ``next_period`` never drifts (no Jan 31 +
1 month = Mar 2 surprises, no leap-day creep).

Functions:
    start_of_period: Normalize a date to its period start
    end_of_period: Last day of the enclosing period
    next_period / previous_period: Start of an adjacent period
    generate_range: Every period start overlapping [start, end]
    periods_overlap: Does a period intersect a date range
    period_key / key_to_date: Canonical integer identity of a period
    period_label: Human-readable names

Usage:
    >>> from datetime import date
    >>> start_of_period(date(2024, 5, 17), Granularity.QUARTERLY)
    datetime.date(2024, 4, 1)
    >>> generate_range(date(2024, 2, 1), date(2024, 2, 29), Granularity.WEEKLY)[0]
    datetime.date(2024, 1, 29)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import calendar
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

# --- Local imports ---
from perinotes.periods.granularity import Granularity
from perinotes.utils.formats import DAY_NAMES, MONTH_NAMES

PeriodKey = int

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def as_date(value: "date | datetime") -> date:
    """Truncate a datetime to its date; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def quarter_of(value: date) -> int:
    """Quarter number 1-4 of a date."""
    return (value.month - 1) // 3 + 1


def _month_start(year: int, month_index: int) -> date:
    """First day of a month given as a (possibly out-of-range) zero-based index."""
    total = year * 12 + month_index
    return date(total // 12, total % 12 + 1, 1)


# ----- Normalization -----

def start_of_period(value: "date | datetime", granularity: Granularity) -> date:
    """
    Project a date to the first day of its enclosing period.

    Idempotent for every granularity.

    Args:
        value: Any date inside the period
        granularity: Period type

    Returns:
        First day of the period (ISO Monday for weekly)
    """
    d = as_date(value)
    if granularity is Granularity.DAILY:
        return d
    if granularity is Granularity.WEEKLY:
        return d - timedelta(days=d.weekday())
    if granularity is Granularity.MONTHLY:
        return d.replace(day=1)
    if granularity is Granularity.QUARTERLY:
        return date(d.year, 3 * (quarter_of(d) - 1) + 1, 1)
    return date(d.year, 1, 1)


def next_period(
    value: "date | datetime", granularity: Granularity, step: int = 1
) -> date:
    """
    Start of the period ``step`` periods after the one containing ``value``.

    Negative steps walk backwards. The result is always a normalized period
    start, so repeated iteration cannot drift.
    """
    start = start_of_period(value, granularity)
    if granularity is Granularity.DAILY:
        return start + timedelta(days=step)
    if granularity is Granularity.WEEKLY:
        return start + timedelta(weeks=step)
    if granularity is Granularity.MONTHLY:
        return _month_start(start.year, start.month - 1 + step)
    if granularity is Granularity.QUARTERLY:
        return _month_start(start.year, start.month - 1 + 3 * step)
    return date(start.year + step, 1, 1)


def previous_period(
    value: "date | datetime", granularity: Granularity, step: int = 1
) -> date:
    """Start of the period ``step`` periods before the one containing ``value``."""
    return next_period(value, granularity, -step)


def end_of_period(value: "date | datetime", granularity: Granularity) -> date:
    """
    Last day of the period containing ``value``.

    Month lengths and leap years fall out of stepping to the next period
    start and going back one day.
    """
    return next_period(value, granularity) - timedelta(days=1)


# ----- Ranges and overlap -----

def generate_range(
    start: "date | datetime", end: "date | datetime", granularity: Granularity
) -> List[date]:
    """
    Every period start whose period overlaps ``[start, end]``, ascending.

    The first element may precede ``start`` (the period containing it).
    An inverted range yields an empty list.

    Args:
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)
        granularity: Period type to enumerate

    Returns:
        Ordered list of period starts
    """
    first, last = as_date(start), as_date(end)
    if last < first:
        return []

    periods: List[date] = []
    current = start_of_period(first, granularity)
    while current <= last:
        periods.append(current)
        current = next_period(current, granularity)
    return periods


def periods_overlap(
    value: "date | datetime",
    granularity: Granularity,
    range_start: "date | datetime",
    range_end: "date | datetime",
) -> bool:
    """
    True if the period of ``value`` shares at least one day with the range.

    A week running Dec 30, 2024 to Jan 5, 2025 overlaps both December and
    January.
    """
    first, last = as_date(range_start), as_date(range_end)
    if last < first:
        return False
    return (
        start_of_period(value, granularity) <= last
        and end_of_period(value, granularity) >= first
    )


def is_same_period(
    first: "date | datetime", second: "date | datetime", granularity: Granularity
) -> bool:
    return start_of_period(first, granularity) == start_of_period(second, granularity)


def is_current_period(
    value: "date | datetime", granularity: Granularity, today: Optional[date] = None
) -> bool:
    return is_same_period(value, today or date.today(), granularity)


# ----- Identity -----

def period_key(value: "date | datetime", granularity: Granularity) -> PeriodKey:
    """
    Canonical integer identity of a period.

    UTC epoch seconds of the period start at midnight. Two dates share a key
    exactly when they fall in the same period of the same granularity.
    """
    start = start_of_period(value, granularity)
    return calendar.timegm(start.timetuple())


def key_to_date(key: PeriodKey) -> date:
    """Inverse of ``period_key``: the period start as a date."""
    return (_EPOCH + timedelta(seconds=key)).date()


# ----- ISO weeks -----

def iso_week_start(week_year: int, week: int) -> date:
    """
    Monday of an ISO week.

    Raises:
        ValueError: If the week does not exist in that week-year
    """
    return date.fromisocalendar(week_year, week, 1)


def weeks_in_iso_year(week_year: int) -> int:
    """52 or 53. Dec 28 always falls in the last ISO week of its year."""
    return date(week_year, 12, 28).isocalendar()[1]


# ----- Labels -----

def period_label(value: "date | datetime", granularity: Granularity) -> str:
    """
    Human-readable name of a period.

    Examples:
        >>> period_label(date(2024, 12, 17), Granularity.DAILY)
        'Tuesday, December 17, 2024'
        >>> period_label(date(2024, 12, 30), Granularity.WEEKLY)
        'Week 1, 2025'
    """
    d = as_date(value)
    if granularity is Granularity.DAILY:
        return f"{DAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
    if granularity is Granularity.WEEKLY:
        week_year, week, _ = d.isocalendar()
        return f"Week {week}, {week_year}"
    if granularity is Granularity.MONTHLY:
        return f"{MONTH_NAMES[d.month - 1]} {d.year}"
    if granularity is Granularity.QUARTERLY:
        return f"Q{quarter_of(d)} {d.year}"
    return str(d.year)
