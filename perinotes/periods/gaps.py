#!/usr/bin/env python3
"""
gaps.py
-------
Missing-period detection.

Given the keys of the periods that already have a note, report the periods
that do not, inside a bounded window:

- the window opens at the earliest existing period (or the current period
  when there are no notes at all);
- it closes at the latest existing period, extended to ``future_horizon``
  periods past the current one when the horizon is positive.

Nothing before the earliest existing note is ever reported, even if an
older note used to exist and was deleted.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from typing import Iterable, List, Optional

# --- Local imports ---
from perinotes.core.exceptions import ConfigurationError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.periods.granularity import Granularity
from perinotes.periods.period_calendar import (
    PeriodKey,
    key_to_date,
    next_period,
    period_key,
    start_of_period,
)


def find_missing_periods(
    existing_keys: Iterable[PeriodKey],
    granularity: Granularity,
    future_horizon: int,
    today: Optional[date] = None,
    logger: Optional[PerinotesLogger] = None,
) -> List[PeriodKey]:
    """
    Period keys with no backing note, ascending.

    Args:
        existing_keys: Keys of periods that have a note (normalized starts)
        granularity: Period type
        future_horizon: Number of periods after the current one to propose;
            0 disables future placeholders
        today: Reference day for "now" (defaults to date.today())
        logger: Optional logger

    Returns:
        Sorted keys of interior gaps and future slots

    Raises:
        ConfigurationError: If future_horizon is negative

    Examples:
        >>> keys = {period_key(date(2024, 1, 15), Granularity.MONTHLY),
        ...         period_key(date(2024, 3, 15), Granularity.MONTHLY)}
        >>> [key_to_date(k) for k in find_missing_periods(
        ...     keys, Granularity.MONTHLY, 0, today=date(2024, 3, 20))]
        [datetime.date(2024, 2, 1)]
    """
    if future_horizon < 0:
        raise ConfigurationError(
            f"future horizon must be zero or positive, got {future_horizon}"
        )

    # Re-normalize in case callers pass raw day keys
    existing = {
        period_key(key_to_date(key), granularity) for key in existing_keys
    }
    current = start_of_period(today or date.today(), granularity)

    if existing:
        lower = key_to_date(min(existing))
        upper = key_to_date(max(existing))
    else:
        lower = current
        upper = None

    if future_horizon > 0:
        horizon_end = next_period(current, granularity, future_horizon)
        upper = horizon_end if upper is None else max(upper, horizon_end)

    if upper is None:
        return []

    missing: List[PeriodKey] = []
    cursor = lower
    while cursor <= upper:
        key = period_key(cursor, granularity)
        if key not in existing:
            missing.append(key)
        cursor = next_period(cursor, granularity)

    safe_logger(logger).log_debug(
        "Missing periods computed",
        {
            "granularity": granularity.value,
            "existing": len(existing),
            "missing": len(missing),
            "horizon": future_horizon,
        },
    )
    return missing
