#!/usr/bin/env python3
"""
merge.py
--------
Combine real period records with missing-period placeholders.

The merged sequence holds exactly one item per period key, real records
winning over placeholders, ordered strictly by key in the requested
direction. It is the input of the view reconciler.

Classes:
    SortDirection: Ascending or descending order
    PeriodRecord: A period that has a note
    MissingPeriod: A synthetic placeholder for a period without a note
    MergedItem: One position in the merged sequence
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

# --- Local imports ---
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.periods.granularity import Granularity
from perinotes.periods.period_calendar import PeriodKey, key_to_date


class SortDirection(str, Enum):
    """
    Enumeration of sort directions.
    - ASC: Oldest period first
    - DESC: Newest period first
    """

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def choices(cls) -> List[str]:
        return [d.value for d in cls]

    @property
    def ascending(self) -> bool:
        return self is SortDirection.ASC


@dataclass(frozen=True)
class PeriodRecord:
    """
    A period backed by a note.

    Attributes:
        key: Normalized period key
        granularity: Period type
        handle: Opaque reference to the note, owned by the document store
    """

    key: PeriodKey
    granularity: Granularity
    handle: Any

    @property
    def date(self) -> date:
        return key_to_date(self.key)


@dataclass(frozen=True)
class MissingPeriod:
    """A period without a note. Regenerated on every pass, never persisted."""

    key: PeriodKey
    granularity: Granularity

    @property
    def date(self) -> date:
        return key_to_date(self.key)


@dataclass(frozen=True)
class MergedItem:
    """
    One entry of the merged sequence.

    Attributes:
        key: Normalized period key
        granularity: Period type
        record: The real record, or None for a placeholder
    """

    key: PeriodKey
    granularity: Granularity
    record: Optional[PeriodRecord] = None

    @property
    def is_missing(self) -> bool:
        return self.record is None

    @property
    def date(self) -> date:
        return key_to_date(self.key)

    @property
    def handle(self) -> Any:
        return self.record.handle if self.record is not None else None

    @property
    def entry(self) -> "PeriodRecord | MissingPeriod":
        """The backing record, or a fresh placeholder for a missing period."""
        if self.record is not None:
            return self.record
        return MissingPeriod(self.key, self.granularity)


def merge_periods(
    records: Iterable[PeriodRecord],
    missing_keys: Iterable[PeriodKey],
    granularity: Granularity,
    direction: SortDirection = SortDirection.DESC,
    logger: Optional[PerinotesLogger] = None,
) -> List[MergedItem]:
    """
    Merge records and placeholders into one ordered, duplicate-free sequence.

    Records are inserted first; when two records share a key the first one
    is kept and the collision is logged. Placeholders are only added for
    keys no record claims.

    Args:
        records: Real records of the given granularity
        missing_keys: Candidate placeholder keys
        granularity: Period type of the sequence
        direction: Sort direction of the output
        logger: Optional logger

    Returns:
        Ordered list of MergedItem
    """
    log = safe_logger(logger)
    by_key: Dict[PeriodKey, MergedItem] = {}

    for record in records:
        if record.key in by_key:
            log.log_warning(
                "Duplicate period record ignored",
                {"key": record.key, "date": record.date, "handle": record.handle},
            )
            continue
        by_key[record.key] = MergedItem(record.key, granularity, record)

    for key in missing_keys:
        if key not in by_key:
            by_key[key] = MergedItem(key, granularity)

    ordered = sorted(by_key, reverse=not SortDirection(direction).ascending)
    return [by_key[key] for key in ordered]
