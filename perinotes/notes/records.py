"""
records.py
----------
Turn notes in the store into period records.

A note belongs to a granularity when its path lies under that
granularity's folder (the deepest matching folder wins when folders nest).
Its period comes from parsing the basename with the file part of the naming
pattern. Notes whose names do not parse are skipped and logged, never
fatal: they neither match a period nor fill a gap.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from typing import Iterable, List, Optional

# --- Local imports ---
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.settings import PeriodConfig, PeriodicSettings
from perinotes.notes.store import DocumentHandle, DocumentStore
from perinotes.periods.granularity import Granularity
from perinotes.periods.merge import PeriodRecord
from perinotes.periods.period_calendar import period_key
from perinotes.utils.formats import filename_pattern, parse_date


def _in_folder(path: str, folder: str) -> bool:
    return path.startswith(folder.rstrip("/") + "/")


def detect_granularity(
    handle: DocumentHandle, settings: PeriodicSettings
) -> Optional[Granularity]:
    """Granularity whose folder holds the note, or None."""
    best: Optional[Granularity] = None
    best_depth = -1
    for granularity in settings.enabled:
        folder = settings.config(granularity).folder
        if folder and _in_folder(handle.path, folder):
            depth = folder.count("/")
            if depth > best_depth:
                best, best_depth = granularity, depth
    return best


def extract_period_date(handle: DocumentHandle, config: PeriodConfig) -> Optional[date]:
    """Date named by a note's basename, or None if it does not parse."""
    return parse_date(handle.basename, filename_pattern(config.naming_pattern))


def build_records(
    handles: Iterable[DocumentHandle],
    granularity: Granularity,
    settings: PeriodicSettings,
    logger: Optional[PerinotesLogger] = None,
) -> List[PeriodRecord]:
    """
    Period records for the notes of one granularity.

    Args:
        handles: Candidate notes (other granularities are ignored)
        granularity: Granularity to collect
        settings: Periodic settings
        logger: Optional logger for skipped notes

    Returns:
        Records in input order
    """
    log = safe_logger(logger)
    config = settings.config(granularity)
    records: List[PeriodRecord] = []

    for handle in handles:
        if detect_granularity(handle, settings) is not granularity:
            continue
        value = extract_period_date(handle, config)
        if value is None:
            log.log_debug(
                "Skipped note with unparseable name",
                {"path": handle.path, "pattern": config.naming_pattern},
            )
            continue
        records.append(PeriodRecord(period_key(value, granularity), granularity, handle))

    return records


async def collect_records(
    store: DocumentStore,
    granularity: Granularity,
    settings: PeriodicSettings,
    logger: Optional[PerinotesLogger] = None,
) -> List[PeriodRecord]:
    """List a granularity's folder and build its records."""
    config = settings.config(granularity)
    if not config.enabled or not config.folder:
        return []
    handles = await store.list(config.folder)
    return build_records(handles, granularity, settings, logger)
