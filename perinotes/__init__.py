"""
Perinotes Package
=================

Calendar-aligned periodic notes (daily, weekly, monthly, quarterly, yearly)
kept as markdown files, shown as an ordered list of cards that is reconciled
incrementally as the note tree changes.

Main Components:
    - periods: Calendar arithmetic, gap detection, merging, hierarchical selection
    - notes: Settings, document store, record discovery, note creation, done reviews
    - view: Reconciler, note cards, debounced saves, optimistic overlay
    - core: Logging, exceptions, paths, validation
    - utils: Naming patterns, filesystem, markdown and template helpers

Primary Interfaces:
    - perinotes.cli: Command-line interface
    - perinotes.view.periodic_view.PeriodicNotesView: Periodic notes view
    - perinotes.view.reconciler.ViewReconciler: Incremental diff engine

Example Usage:
    >>> from datetime import date
    >>> from perinotes.periods.granularity import Granularity
    >>> from perinotes.periods.period_calendar import start_of_period
    >>> start_of_period(date(2024, 12, 31), Granularity.WEEKLY)
    datetime.date(2024, 12, 30)
"""

__version__ = "0.3.0"
