#!/usr/bin/env python3
"""
completion.py
-------------
Done-status tracking with optimistic updates.

Toggling a period's done flag updates the UI at once through an
OptimisticOverlay, then does the slow work: the cascade over child periods,
the frontmatter mirror on existing notes and the YAML save. If any of it
fails the user gets a notice and, after a short delay, the overlay entry
is dropped so the last confirmed state shows again. Notes already rewritten
by the mirror get their previous content back. Listeners are told about
every change, including rollbacks.

A period also counts as done when its note carries the done flag in its
frontmatter, so flags set by other tools show up in the list. Flags are
learnt from note content handed to ``observe_note`` and kept current by
the mirror.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
import inspect
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

# --- Third party imports ---
import yaml

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.creation import note_path
from perinotes.notes.done_reviews import (
    DoneReviews,
    DoneReviewsStore,
    is_note_done,
    is_period_done,
    mark_period_with_cascade,
    set_note_done,
)
from perinotes.notes.notices import EchoNotifier, Notifier
from perinotes.notes.settings import PeriodicSettings
from perinotes.notes.store import DocumentHandle, DocumentStore
from perinotes.periods.granularity import Granularity, children
from perinotes.periods.period_calendar import (
    PeriodKey,
    end_of_period,
    generate_range,
    period_key,
    start_of_period,
)
from perinotes.view.overlay import OptimisticOverlay

CompletionListener = Callable[[date, Granularity, bool], Any]
OverlayKey = Tuple[Granularity, PeriodKey]
WrittenNote = Tuple[OverlayKey, DocumentHandle, str]

ROLLBACK_DELAY = 0.1
ERROR_NOTICE_TIMEOUT = 5.0


class CompletionTracker:
    """
    Done flags for periods, with cascade, persistence and listeners.

    Attributes:
        reviews: Last confirmed DoneReviews
        note_flags: Frontmatter done flags of the notes seen so far
        overlay: Optimistic values awaiting confirmation
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: PeriodicSettings,
        reviews_store: Optional[DoneReviewsStore] = None,
        notifier: Optional[Notifier] = None,
        logger: Optional[PerinotesLogger] = None,
        overlay: Optional[OptimisticOverlay[OverlayKey, bool]] = None,
        rollback_delay: float = ROLLBACK_DELAY,
    ) -> None:
        self.store = store
        self.settings = settings
        self.reviews_store = reviews_store
        self.notifier = notifier or EchoNotifier()
        self.logger = safe_logger(logger)
        self.overlay: OptimisticOverlay[OverlayKey, bool] = overlay or OptimisticOverlay()
        self.rollback_delay = rollback_delay
        self.reviews = reviews_store.load() if reviews_store is not None else DoneReviews()
        self.note_flags: Dict[OverlayKey, bool] = {}
        self._listeners: List[CompletionListener] = []

    # ----- Listeners -----

    def add_listener(self, listener: CompletionListener) -> Callable[[], None]:
        """Subscribe to done-status changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify_listeners(self, value: date, granularity: Granularity, is_done: bool) -> None:
        for listener in list(self._listeners):
            result = listener(value, granularity, is_done)
            if inspect.isawaitable(result):
                await result

    # ----- Queries -----

    def note_flag(self, content: str) -> bool:
        """Done flag in a note's frontmatter; malformed frontmatter reads as not done."""
        try:
            return is_note_done(content, self.settings.view.done_property)
        except yaml.YAMLError:
            return False

    def observe_note(self, value: date, granularity: Granularity, content: str) -> bool:
        """Record the done flag of a period's note from its current content."""
        flag = self.note_flag(content)
        self.note_flags[(granularity, period_key(value, granularity))] = flag
        return flag

    def is_done(self, value: date, granularity: Granularity) -> bool:
        """
        Optimistic value if one is live, else the confirmed state.

        A period is confirmed done when the done reviews list it or its
        note's frontmatter flag is set.
        """
        key = (granularity, period_key(value, granularity))
        confirmed = is_period_done(self.reviews, value, granularity, self.settings)
        return self.overlay.resolve(key, confirmed or self.note_flags.get(key, False))

    # ----- Updates -----

    async def _mirror_frontmatter(
        self,
        value: date,
        granularity: Granularity,
        is_done: bool,
        written: List[WrittenNote],
    ) -> int:
        """
        Write the done flag into every existing note of the cascade.

        Each note is appended to ``written`` with its previous content
        before it is rewritten.
        """
        property_name = self.settings.view.done_property
        start = start_of_period(value, granularity)
        end = end_of_period(value, granularity)

        targets = [(granularity, [start])]
        for child in children(granularity):
            if self.settings.config(child).enabled:
                targets.append((child, generate_range(start, end, child)))

        updated = 0
        for target, dates in targets:
            config = self.settings.config(target)
            if not config.enabled:
                continue
            for day in dates:
                handle = await self.store.get(note_path(day, config, target))
                if handle is None:
                    continue
                content = await self.store.read(handle)
                try:
                    new_content = set_note_done(content, is_done, property_name)
                except yaml.YAMLError as e:
                    self.logger.log_warning(
                        "Malformed frontmatter, done flag not written",
                        {"path": handle.path, "error": str(e)},
                    )
                    continue
                key = (target, period_key(day, target))
                if new_content != content:
                    written.append((key, handle, content))
                    await self.store.write(handle, new_content)
                    updated += 1
                self.note_flags[key] = is_done
        return updated

    async def _restore_notes(self, written: List[WrittenNote]) -> None:
        for key, handle, content in reversed(written):
            self.note_flags[key] = self.note_flag(content)
            try:
                await self.store.write(handle, content)
            except DocumentStoreError as e:
                self.logger.log_error(e, {"operation": "restore_note", "path": handle.path})

    async def set_done(self, value: date, granularity: Granularity, is_done: bool) -> bool:
        """
        Mark a period (and its enabled children) done or not done.

        Args:
            value: Any date in the period
            granularity: Period type
            is_done: New status

        Returns:
            True when the change was persisted, False when it was rolled back
        """
        key = (granularity, period_key(value, granularity))
        previous = self.is_done(value, granularity)
        self.overlay.set(key, is_done)

        updated = mark_period_with_cascade(self.reviews, value, granularity, self.settings, is_done)
        written: List[WrittenNote] = []
        try:
            notes = await self._mirror_frontmatter(value, granularity, is_done, written)
            if self.reviews_store is not None:
                await asyncio.to_thread(self.reviews_store.save, updated)
        except (DocumentStoreError, OSError) as e:
            self.logger.log_error(
                e, {"operation": "set_done", "granularity": granularity.value, "date": value}
            )
            self.notifier.notify(
                f"Failed to update {granularity.value} notes: {e}", ERROR_NOTICE_TIMEOUT
            )
            await self._restore_notes(written)
            await asyncio.sleep(self.rollback_delay)
            self.overlay.clear(key)
            await self._notify_listeners(value, granularity, previous)
            return False

        self.reviews = updated
        self.logger.log_operation(
            "set_done",
            {"granularity": granularity.value, "date": value, "done": is_done, "notes": notes},
        )
        await self._notify_listeners(value, granularity, is_done)
        return True

    async def toggle_done(self, value: date, granularity: Granularity) -> bool:
        return await self.set_done(value, granularity, not self.is_done(value, granularity))
