"""
Tests for template variable substitution.
"""
from datetime import date

from perinotes.utils.templates import note_variables, substitute_variables


class TestSubstituteVariables:
    """Tests for substitute_variables."""

    def test_replaces_known_variables(self):
        result = substitute_variables("# {{title}}\n{{date}}", {"title": "2024-W03", "date": "2024-01-15"})
        assert result == "# 2024-W03\n2024-01-15"

    def test_lists_are_joined_and_none_is_empty(self):
        result = substitute_variables("{{items}}|{{empty}}", {"items": ["a", "b"], "empty": None})
        assert result == "a\nb|"

    def test_unknown_placeholders_are_left(self):
        assert substitute_variables("{{other}}", {"title": "x"}) == "{{other}}"


class TestNoteVariables:
    """Tests for note_variables."""

    def test_variables(self):
        variables = note_variables("2024-Q1", date(2024, 1, 1), "Q1 2024")
        assert variables == {"title": "2024-Q1", "date": "2024-01-01", "period": "Q1 2024"}
