#!/usr/bin/env python3
"""
periodic_view.py
----------------
The periodic notes list.

Every data update runs one pass under a lock:

    collect_records -> find_missing_periods -> merge_periods
        -> ViewReconciler.reconcile -> apply to renderer and cards

Removed cards are detached (their pending saves flushed) before the
renderer drops them; kept cards refresh their content in place. The card
holding focus is left alone until a pass finds it unfocused.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
from datetime import date
from typing import Callable, Dict, List, Optional

# --- Local imports ---
from perinotes.core.exceptions import ReconciliationError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.creation import NoteCreationService
from perinotes.notes.notices import EchoNotifier, Notifier
from perinotes.notes.records import collect_records
from perinotes.notes.settings import PeriodicSettings
from perinotes.notes.store import DocumentHandle, DocumentStore
from perinotes.periods.gaps import find_missing_periods
from perinotes.periods.granularity import Granularity
from perinotes.periods.merge import MergedItem, merge_periods
from perinotes.periods.period_calendar import PeriodKey, key_to_date
from perinotes.view.card import NoteCard
from perinotes.view.completion import CompletionListener, CompletionTracker
from perinotes.view.debounce import DEFAULT_DELAY
from perinotes.view.editor import EditorFactory, in_memory_editor_factory
from perinotes.view.events import PollingEventSource
from perinotes.view.reconciler import EditScript, OpKind, ViewReconciler
from perinotes.view.render_state import CardMode, NodeId, RenderState
from perinotes.view.renderer import CardRenderer


class PeriodicNotesView:
    """
    Reconciled list of periodic note cards for one granularity.

    Args:
        store: Document store holding the notes
        settings: Periodic settings (folders, patterns, view options)
        renderer: Target of structural operations
        editor_factory: Builds editors for editable cards
        creator: Creates notes for missing periods
        completion: Done-status tracker
        notifier: Target of user notices
        today: Clock for "now" (defaults to date.today)
        save_delay: Debounce delay of editor saves
        logger: Optional logger
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: PeriodicSettings,
        renderer: CardRenderer,
        editor_factory: EditorFactory = in_memory_editor_factory,
        creator: Optional[NoteCreationService] = None,
        completion: Optional[CompletionTracker] = None,
        notifier: Optional[Notifier] = None,
        today: Callable[[], date] = date.today,
        save_delay: float = DEFAULT_DELAY,
        logger: Optional[PerinotesLogger] = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.renderer = renderer
        self.editor_factory = editor_factory
        self.notifier = notifier or EchoNotifier()
        self.creator = creator or NoteCreationService(store, notifier=self.notifier, logger=logger)
        self.completion = completion
        self.today = today
        self.save_delay = save_delay
        self.logger = safe_logger(logger)

        self.reconciler = ViewReconciler(logger)
        self.cards: Dict[NodeId, NoteCard] = {}
        self.last_missing = 0
        self._lock = asyncio.Lock()
        self._unsubscribers: List[Callable[[], None]] = []

        if completion is not None:
            self._unsubscribers.append(completion.add_listener(self.on_period_completion_changed))

    @property
    def granularity(self) -> Granularity:
        return self.settings.view.mode

    # ----- Passes -----

    def _focused_key(self) -> Optional[PeriodKey]:
        for node, card in self.cards.items():
            if not node.synthetic and card.has_focus:
                return node.key
        return self.reconciler.focused_key

    async def on_data_updated(self) -> EditScript:
        """Run one reconciliation pass; passes never interleave."""
        async with self._lock:
            return await self._run_pass()

    async def _run_pass(self) -> EditScript:
        granularity = self.granularity
        options = self.settings.view

        records = await collect_records(self.store, granularity, self.settings, self.logger)
        missing: List[PeriodKey] = []
        if options.show_missing:
            missing = find_missing_periods(
                [record.key for record in records],
                granularity,
                options.future_periods,
                today=self.today(),
                logger=self.logger,
            )
        sequence = merge_periods(records, missing, granularity, options.direction, self.logger)

        focused = self._focused_key()
        self.reconciler.set_focus(focused)
        script = self.reconciler.reconcile(sequence, focused, options.expand_first)
        self.last_missing = len(missing)

        await self._apply(script)
        if not script.order:
            self.renderer.show_empty_state(f"No {granularity.unit_name} notes found")
        else:
            self.renderer.show_empty_state(None)

        self.logger.log_debug(
            "View pass applied",
            {"granularity": granularity.value, "missing": len(missing), **script.summary()},
        )
        return script

    async def _apply(self, script: EditScript) -> None:
        for op in script.ops:
            if op.kind is OpKind.REMOVE:
                card = self.cards.pop(op.node, None)
                if card is not None:
                    await card.detach()
                self.renderer.remove(op.node)
            elif op.kind is OpKind.CREATE:
                if op.item is None or op.state is None:
                    raise ReconciliationError(f"Create without item or state for {op.node}")
                card = self._build_card(op.node, op.item, op.state)
                self.cards[op.node] = card
                self.renderer.create(op.node, card, op.before)
                if op.state.expanded and await card.load():
                    self._refresh_done(op.node, card, observe=True)
            elif op.kind is OpKind.MOVE:
                self.renderer.move(op.node, op.before)
                self.cards[op.node].update(op.item, op.state)  # type: ignore[arg-type]
            else:
                card = self.cards[op.node]
                card.update(op.item, op.state)  # type: ignore[arg-type]
                changed = await card.refresh_content()
                self._refresh_done(op.node, card, observe=changed)

    def _build_card(self, node: NodeId, item: MergedItem, state: RenderState) -> NoteCard:
        card = NoteCard(
            item,
            state,
            self.store,
            on_state_change=None if node.synthetic else self.reconciler.update_state,
            editor_factory=self.editor_factory,
            on_render=lambda content: self.renderer.update_content(node, content),
            notifier=self.notifier,
            save_delay=self.save_delay,
            logger=self.logger,
        )
        self._refresh_done(node, card)
        return card

    def _refresh_done(self, node: NodeId, card: NoteCard, observe: bool = False) -> None:
        """Recompute a card's done flag, first reading its note's flag when ``observe``."""
        if self.completion is None or node.synthetic:
            return
        value = card.item.date
        if observe and card.content is not None:
            self.completion.observe_note(value, self.granularity, card.content)
        card.is_done = self.completion.is_done(value, self.granularity)

    # ----- Queries -----

    def card(self, key: PeriodKey) -> Optional[NoteCard]:
        """The real (non-placeholder) card of a period."""
        return self.cards.get(NodeId(key))

    def get_visible_handles(self) -> List[DocumentHandle]:
        """Handles of the rendered real notes, in display order."""
        handles = []
        for node in self.reconciler.order:
            card = self.cards.get(node)
            if card is not None and not card.is_placeholder:
                handles.append(card.item.handle)
        return handles

    # ----- Interaction -----

    def _require_card(self, key: PeriodKey) -> NoteCard:
        card = self.card(key)
        if card is None:
            raise KeyError(f"No note card for key {key}")
        return card

    async def toggle_expanded(self, key: PeriodKey) -> bool:
        card = self._require_card(key)
        expanded = await card.toggle_expanded()
        self._refresh_done(NodeId(key), card, observe=expanded)
        return expanded

    async def set_mode(self, key: PeriodKey, mode: CardMode) -> None:
        card = self._require_card(key)
        await card.set_mode(mode)
        self._refresh_done(NodeId(key), card, observe=card.loaded)

    async def set_focus(self, key: Optional[PeriodKey]) -> None:
        """
        Record which card holds focus (None: no card).

        When focus leaves a card whose removal was deferred, a pass runs
        so the card goes away.
        """
        deferred = {node.key for node in self.reconciler.deferred}
        self.reconciler.set_focus(key)
        if deferred - ({key} if key is not None else set()):
            await self.on_data_updated()

    async def create_missing(self, key: PeriodKey) -> Optional[DocumentHandle]:
        """Create the note of a missing period and refresh the list."""
        granularity = self.granularity
        handle = await self.creator.create_periodic_note(
            key_to_date(key), self.settings.config(granularity), granularity
        )
        if handle is not None:
            await self.on_data_updated()
        return handle

    # ----- Completion -----

    def add_completion_listener(self, listener: CompletionListener) -> Callable[[], None]:
        if self.completion is None:
            raise RuntimeError("Completion tracking is not configured")
        return self.completion.add_listener(listener)

    async def toggle_done(self, key: PeriodKey) -> bool:
        if self.completion is None:
            raise RuntimeError("Completion tracking is not configured")
        return await self.completion.toggle_done(key_to_date(key), self.granularity)

    def on_period_completion_changed(
        self, value: date, granularity: Granularity, is_done: bool
    ) -> None:
        """Reflect a done-status change (cascades included) on the cards."""
        for node, card in self.cards.items():
            self._refresh_done(node, card)

    # ----- Lifecycle -----

    def watch(self, source: PollingEventSource) -> None:
        """Run a pass whenever the source reports a change."""
        self._unsubscribers.append(source.subscribe(self.on_data_updated))

    async def close(self) -> None:
        """Unsubscribe and detach every card, flushing pending saves."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        async with self._lock:
            for card in self.cards.values():
                await card.detach()
