"""
Tests for filesystem helpers.
"""
from pathlib import Path

from perinotes.utils.fs import ensure_dir, find_markdown_files, note_basename, relative_note_path


class TestFindMarkdownFiles:
    """Tests for find_markdown_files."""

    def test_finds_sorted_markdown_files(self, tmp_dir, write_note):
        write_note("Daily/2024-01-16.md")
        write_note("Daily/2024-01-15.md")
        write_note("Daily/sub/2024-01-17.md")
        write_note("Daily/image.png")

        found = find_markdown_files(tmp_dir / "Daily")
        assert [p.name for p in found] == ["2024-01-15.md", "2024-01-16.md", "2024-01-17.md"]

    def test_missing_directory_is_empty(self, tmp_dir):
        assert find_markdown_files(tmp_dir / "nope") == []


class TestPathHelpers:
    """Tests for path helpers."""

    def test_ensure_dir_creates_parents(self, tmp_dir):
        target = ensure_dir(tmp_dir / "a" / "b")
        assert target.is_dir()

    def test_relative_note_path(self):
        assert relative_note_path(Path("/notes/Weekly/2024-W03.md"), Path("/notes")) == "Weekly/2024-W03.md"

    def test_note_basename(self):
        assert note_basename("Weekly/2024-W03.md") == "2024-W03"
        assert note_basename("README") == "README"
