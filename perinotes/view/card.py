#!/usr/bin/env python3
"""
card.py
-------
One rendered period in the periodic notes list.

A NoteCard shows a note either read-only (VIEW) or through a TextEditor
(EDIT_PREVIEW / EDIT_SOURCE). Placeholder cards stand for a missing period
and never load content.

Edits are saved through a Debouncer. While a save is pending, refreshes
leave the editor alone so an external reload cannot resurrect older text.
Once a card is detached, loads that complete late are discarded.

The card never owns its RenderState: changes go through ``on_state_change``
(the reconciler's ``update_state``) and the returned state is stored back.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
from typing import Callable, Optional

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.notices import EchoNotifier, Notifier
from perinotes.notes.store import DocumentStore
from perinotes.periods.merge import MergedItem
from perinotes.periods.period_calendar import PeriodKey
from perinotes.view.debounce import DEFAULT_DELAY, Debouncer
from perinotes.view.editor import (
    EditorFactory,
    EditorOptions,
    TextEditor,
    in_memory_editor_factory,
    set_value_preserving_state,
)
from perinotes.view.render_state import CardMode, RenderState

StateChange = Callable[..., RenderState]
SAVE_ERROR_TIMEOUT = 5.0
LOAD_ERROR_TIMEOUT = 5.0


class NoteCard:
    """
    Card for a real note or a missing-period placeholder.

    Args:
        item: Merged item rendered by the card
        state: Initial RenderState
        store: Document store the note lives in
        on_state_change: Records a state change, returns the new state
        editor_factory: Builds editors for editable modes
        on_render: Receives content to display in VIEW mode
        notifier: Target of save failure notices
        save_delay: Debounce delay of editor saves in seconds
        logger: Optional logger
    """

    def __init__(
        self,
        item: MergedItem,
        state: RenderState,
        store: DocumentStore,
        on_state_change: Optional[StateChange] = None,
        editor_factory: EditorFactory = in_memory_editor_factory,
        on_render: Optional[Callable[[str], None]] = None,
        notifier: Optional[Notifier] = None,
        save_delay: float = DEFAULT_DELAY,
        logger: Optional[PerinotesLogger] = None,
    ) -> None:
        self.item = item
        self.state = state
        self.store = store
        self.editor_factory = editor_factory
        self.notifier = notifier or EchoNotifier()
        self.logger = safe_logger(logger)
        self._on_state_change = on_state_change
        self._on_render = on_render

        self.content: Optional[str] = None
        self.editor: Optional[TextEditor] = None
        self.is_done = False
        self.loaded = False
        self.detached = False
        self.render_count = 0

        self._pending_content: Optional[str] = None
        self._updating_externally = False
        self._escape_task: Optional[asyncio.Task] = None
        self.debouncer = Debouncer(
            self._save, save_delay, on_error=self._on_save_error, logger=logger
        )

    # ----- Properties -----

    @property
    def key(self) -> PeriodKey:
        return self.item.key

    @property
    def is_placeholder(self) -> bool:
        return self.item.is_missing

    @property
    def has_focus(self) -> bool:
        """True when the card's editor holds keyboard focus."""
        return self.editor is not None and self.editor.has_focus()

    # ----- State -----

    def _change_state(self, **changes) -> RenderState:
        if self._on_state_change is not None:
            self.state = self._on_state_change(self.key, **changes)
        else:
            self.state = RenderState(
                expanded=changes.get("expanded", self.state.expanded),
                mode=changes.get("mode", self.state.mode),
                has_focus=changes.get("has_focus", self.state.has_focus),
            )
        return self.state

    def update(self, item: MergedItem, state: Optional[RenderState]) -> None:
        """Take over the item and state of a kept or moved node."""
        self.item = item
        if state is not None:
            self.state = state

    # ----- Content -----

    def _render(self) -> None:
        self.render_count += 1
        if self._on_render is not None and self.content is not None:
            self._on_render(self.content)

    def _mount_body(self) -> None:
        if self.content is None or not self.state.expanded:
            self.editor = None
            return
        if not self.state.mode.is_editable:
            self.editor = None
            self._render()
            return
        self.editor = self.editor_factory(
            EditorOptions(
                initial_content=self.content,
                on_change=self._on_editor_change,
                on_escape=self.on_escape,
                mode=self.state.mode,
            )
        )

    async def _read(self) -> Optional[str]:
        """Read the note; a failed read is reported and yields None."""
        try:
            return await self.store.read(self.item.handle)
        except DocumentStoreError as e:
            self.logger.log_error(e, {"operation": "card_load", "path": self.item.handle.path})
            self.notifier.notify(f"Failed to load {self.item.handle}: {e}", LOAD_ERROR_TIMEOUT)
            return None

    async def load(self) -> bool:
        """
        Read the note and mount its body.

        Returns:
            False for placeholders, failed reads and loads finishing after detach
        """
        if self.is_placeholder or self.detached:
            return False
        content = await self._read()
        if content is None:
            return False
        if self.detached:
            self.logger.log_debug("Discarded load of detached card", {"key": self.key})
            return False
        self.content = content
        self.loaded = True
        self._mount_body()
        return True

    async def refresh_content(self) -> bool:
        """
        Bring an expanded, loaded card up to date with its note.

        VIEW cards re-render when the content changed. Editable cards are
        updated in place, keeping cursor and scroll, unless their editor is
        focused or a save is pending.

        Returns:
            True if the displayed content changed
        """
        if self.is_placeholder or self.detached or not self.state.expanded or not self.loaded:
            return False

        if not self.state.mode.is_editable:
            content = await self._read()
            if content is None or self.detached or content == self.content:
                return False
            self.content = content
            self._render()
            return True

        if self.has_focus or self.debouncer.pending:
            return False
        content = await self._read()
        if content is None or self.detached:
            return False

        # Focus and pending saves may have changed during the read
        if self.has_focus or self.debouncer.pending:
            self.logger.log_debug("Skipped refresh of busy editor", {"key": self.key})
            return False
        if self.editor is None:
            self.content = content
            return False

        self._updating_externally = True
        try:
            changed = set_value_preserving_state(self.editor, content)
        finally:
            self._updating_externally = False
        self.content = content
        return changed

    # ----- Saving -----

    def _on_editor_change(self, value: str) -> None:
        if self._updating_externally:
            return
        self._pending_content = value
        self.debouncer.schedule()

    async def _save(self) -> None:
        content = self._pending_content
        if content is None or self.is_placeholder:
            return
        self._pending_content = None
        await self.store.write(self.item.handle, content)
        self.content = content

    def _on_save_error(self, error: DocumentStoreError) -> None:
        self.notifier.notify(f"Failed to save {self.item.handle}: {error}", SAVE_ERROR_TIMEOUT)

    # ----- Interaction -----

    async def set_mode(self, mode: CardMode) -> None:
        """Switch display mode, saving pending edits and reloading the note."""
        if mode is self.state.mode:
            return
        await self.debouncer.flush()
        self._change_state(mode=mode)
        if self.loaded:
            await self.load()

    async def toggle_expanded(self) -> bool:
        """Expand (loading on first use) or collapse the card."""
        expanded = not self.state.expanded
        if not expanded:
            await self.debouncer.flush()
        self._change_state(expanded=expanded)
        if expanded:
            await self.load()
        else:
            self.editor = None
        return expanded

    def on_escape(self) -> None:
        """Escape in the editor: leave edit mode after saving."""
        self._escape_task = asyncio.get_running_loop().create_task(self.set_mode(CardMode.VIEW))

    async def detach(self) -> None:
        """Flush pending saves and stop accepting loads."""
        self.detached = True
        await self.debouncer.flush()
        self.editor = None
