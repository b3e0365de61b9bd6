#!/usr/bin/env python3
"""
editor.py
---------
The text-editing widget, as seen by note cards.

Cards only talk to editors through the TextEditor protocol, and build them
through an EditorFactory from EditorOptions. InMemoryEditor is a headless
implementation used by the CLI and the tests.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Tuple

# --- Local imports ---
from perinotes.view.cursor import calculate_new_cursor_position
from perinotes.view.render_state import CardMode

Selection = Tuple[int, int]


@dataclass(frozen=True)
class EditorState:
    """
    Selection and scroll snapshot of an editor.

    Attributes:
        cursor: Main cursor offset
        selections: (anchor, head) ranges
        scroll_top: Vertical scroll offset
        doc_length: Content length when captured
    """

    cursor: int
    selections: Tuple[Selection, ...] = ()
    scroll_top: float = 0.0
    doc_length: int = 0


@dataclass
class EditorOptions:
    initial_content: str
    on_change: Callable[[str], None]
    on_escape: Callable[[], None]
    mode: CardMode = CardMode.EDIT_PREVIEW


class TextEditor(Protocol):
    def get_value(self) -> str:
        ...

    def set_value(self, content: str) -> None:
        ...

    def has_focus(self) -> bool:
        ...

    def get_selection_and_scroll_state(self) -> EditorState:
        ...

    def restore_selection_and_scroll_state(self, state: EditorState) -> None:
        ...


EditorFactory = Callable[[EditorOptions], TextEditor]


def set_value_preserving_state(editor: TextEditor, new_content: str) -> bool:
    """
    Replace editor content, carrying the cursor and scroll position over.

    Returns:
        False when the content was already identical, True otherwise
    """
    current = editor.get_value()
    if current == new_content:
        return False

    saved = editor.get_selection_and_scroll_state()
    position = min(
        calculate_new_cursor_position(current, new_content, saved.cursor), len(new_content)
    )
    editor.set_value(new_content)
    editor.restore_selection_and_scroll_state(
        EditorState(
            cursor=position,
            selections=((position, position),),
            scroll_top=saved.scroll_top,
            doc_length=len(new_content),
        )
    )
    return True


@dataclass
class InMemoryEditor:
    """
    Headless TextEditor.

    ``set_value`` fires on_change like a real editor does on any document
    change; callers that replace content programmatically must guard
    against their own echo.
    """

    options: EditorOptions
    value: str = ""
    cursor: int = 0
    scroll_top: float = 0.0
    focused: bool = False
    selections: Tuple[Selection, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.value = self.options.initial_content

    # ----- TextEditor -----

    def get_value(self) -> str:
        return self.value

    def set_value(self, content: str) -> None:
        self.value = content
        self.cursor = min(self.cursor, len(content))
        self.options.on_change(content)

    def has_focus(self) -> bool:
        return self.focused

    def get_selection_and_scroll_state(self) -> EditorState:
        return EditorState(
            cursor=self.cursor,
            selections=self.selections or ((self.cursor, self.cursor),),
            scroll_top=self.scroll_top,
            doc_length=len(self.value),
        )

    def restore_selection_and_scroll_state(self, state: EditorState) -> None:
        self.cursor = min(state.cursor, len(self.value))
        self.selections = state.selections
        self.scroll_top = state.scroll_top

    # ----- User simulation -----

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def type_text(self, text: str, at: Optional[int] = None) -> None:
        """Insert text at a position (default: the cursor) as the user would."""
        position = self.cursor if at is None else at
        self.value = self.value[:position] + text + self.value[position:]
        self.cursor = position + len(text)
        self.options.on_change(self.value)

    def press_escape(self) -> None:
        self.options.on_escape()


def in_memory_editor_factory(options: EditorOptions) -> InMemoryEditor:
    return InMemoryEditor(options)
