"""
Tests for the in-memory TextEditor.
"""
from unittest.mock import MagicMock

from perinotes.view.editor import EditorOptions, in_memory_editor_factory
from perinotes.view.render_state import CardMode


def make_options(content: str = "text") -> EditorOptions:
    return EditorOptions(content, on_change=MagicMock(), on_escape=MagicMock(), mode=CardMode.EDIT_SOURCE)


class TestInMemoryEditor:
    """Tests for InMemoryEditor."""

    def test_factory_builds_editor_with_initial_content(self):
        editor = in_memory_editor_factory(make_options("hello"))
        assert editor.get_value() == "hello"
        assert editor.has_focus() is False

    def test_focus_and_blur(self):
        editor = in_memory_editor_factory(make_options())
        editor.focus()
        assert editor.has_focus() is True
        editor.blur()
        assert editor.has_focus() is False

    def test_typing_inserts_at_cursor_and_fires_change(self):
        options = make_options("ac")
        editor = in_memory_editor_factory(options)
        editor.cursor = 1
        editor.type_text("b")
        assert editor.get_value() == "abc"
        assert editor.cursor == 2
        options.on_change.assert_called_once_with("abc")

    def test_typing_at_explicit_position(self):
        editor = in_memory_editor_factory(make_options("world"))
        editor.type_text("hello ", at=0)
        assert editor.get_value() == "hello world"

    def test_escape_calls_handler(self):
        options = make_options()
        editor = in_memory_editor_factory(options)
        editor.press_escape()
        options.on_escape.assert_called_once()

    def test_restore_clamps_to_document(self):
        editor = in_memory_editor_factory(make_options("0123456789"))
        editor.cursor = 8
        state = editor.get_selection_and_scroll_state()
        editor.set_value("012")
        editor.restore_selection_and_scroll_state(state)
        assert editor.cursor <= 3
