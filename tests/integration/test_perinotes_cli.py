"""
Integration tests for the perinotes CLI.

Each test runs commands against a temporary notes root holding its own
.perinotes/settings.yaml.
"""
import pytest
import yaml
from click.testing import CliRunner

from perinotes.cli import cli

pytestmark = pytest.mark.integration


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def root(tmp_dir, settings_data):
    """Notes root with settings for every granularity."""
    state = tmp_dir / ".perinotes"
    state.mkdir()
    (state / "settings.yaml").write_text(yaml.safe_dump(settings_data), encoding="utf-8")
    return tmp_dir


def invoke(runner, root, *args):
    return runner.invoke(cli, ["--root", str(root), *args])


class TestListCommand:
    """Tests for `perinotes list`."""

    def test_lists_notes_with_placeholders(self, runner, root, write_note):
        write_note("Daily/2024-01-15.md", "Monday\n")
        write_note("Daily/2024-01-17.md", "Wednesday\n")

        result = invoke(runner, root, "list")

        assert result.exit_code == 0, result.output
        assert "📅 Daily notes" in result.output
        assert "(missing)" in result.output
        assert result.output.index("2024-01-17.md") < result.output.index("2024-01-15.md")
        assert "3 created, 0 removed, 0 moved, 0 kept, 0 deferred, 1 missing" in result.output

    def test_ascending_without_placeholders(self, runner, root, write_note):
        write_note("Daily/2024-01-15.md")
        write_note("Daily/2024-01-17.md")

        result = invoke(runner, root, "list", "--asc", "--no-missing")

        assert result.exit_code == 0, result.output
        assert "(missing)" not in result.output
        assert result.output.index("2024-01-15.md") < result.output.index("2024-01-17.md")

    def test_other_granularity(self, runner, root, write_note):
        write_note("Monthly/2024-01.md")
        write_note("Monthly/2024-03.md")

        result = invoke(runner, root, "list", "-g", "monthly")

        assert result.exit_code == 0, result.output
        assert "📅 Monthly notes" in result.output
        assert "1 missing" in result.output

    def test_empty_root(self, runner, root):
        result = invoke(runner, root, "list")
        assert result.exit_code == 0, result.output
        assert "No day notes found" in result.output

    def test_disabled_granularity_fails(self, runner, root, settings_data):
        settings_data["weekly"]["enabled"] = False
        (root / ".perinotes" / "settings.yaml").write_text(
            yaml.safe_dump(settings_data), encoding="utf-8"
        )

        result = invoke(runner, root, "list", "-g", "weekly")

        assert result.exit_code == 1
        assert "Weekly notes are not enabled" in result.output

    def test_invalid_settings_fail(self, runner, root):
        (root / ".perinotes" / "settings.yaml").write_text("daily: [broken\n", encoding="utf-8")
        result = invoke(runner, root, "list")
        assert result.exit_code == 1
        assert "ConfigurationError" in result.output


class TestCreateCommand:
    """Tests for `perinotes create`."""

    def test_creates_note(self, runner, root):
        result = invoke(runner, root, "create", "weekly", "2024-12-31")

        assert result.exit_code == 0, result.output
        assert (root / "Weekly" / "2025-W01.md").exists()
        assert "Created: 2025-W01" in result.output
        assert "📝 Weekly/2025-W01.md" in result.output

    def test_existing_note_is_reported(self, runner, root, write_note):
        write_note("Daily/2024-01-16.md", "Keep me\n")

        result = invoke(runner, root, "create", "daily", "2024-01-16")

        assert result.exit_code == 0, result.output
        assert "Note already exists: 2024-01-16" in result.output
        assert (root / "Daily" / "2024-01-16.md").read_text(encoding="utf-8") == "Keep me\n"

    def test_rejects_bad_date(self, runner, root):
        result = invoke(runner, root, "create", "daily", "16/01/2024")
        assert result.exit_code == 2


class TestCandidatesCommand:
    """Tests for `perinotes candidates`."""

    def test_weeks_of_month_mark_existing_notes(self, runner, root, write_note):
        write_note("Weekly/2024-W06.md")

        result = invoke(runner, root, "candidates", "weekly", "--year", "2024", "--month", "2")

        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if "(2024-02-05)" in line]
        assert len(lines) == 1
        assert lines[0].lstrip().startswith("•")
        assert "○" in result.output

    def test_months_of_quarter(self, runner, root):
        result = invoke(
            runner, root, "candidates", "monthly", "--year", "2024", "--quarter", "2"
        )

        assert result.exit_code == 0, result.output
        assert "(2024-04-01)" in result.output
        assert "(2024-06-01)" in result.output
        assert "(2024-07-01)" not in result.output


class TestCopySectionCommand:
    """Tests for `perinotes copy-section`."""

    def test_copies_day_section_into_week(self, runner, root, write_note):
        write_note("Daily/2024-01-17.md", "# Wednesday\n\n## Wins\n- shipped\n")
        week = write_note("Weekly/2024-W03.md", "# Week 3\n")

        result = invoke(runner, root, "copy-section", "daily", "2024-01-17", "Wins", "--to", "weekly")

        assert result.exit_code == 0, result.output
        assert 'Added "Wins" to 2024-W03' in result.output
        assert week.read_text(encoding="utf-8") == "# Week 3\n\n## Wins\n\n- shipped\n"

        result = invoke(runner, root, "copy-section", "daily", "2024-01-17", "Wins", "--to", "weekly")
        assert 'Appended to "Wins" in 2024-W03' in result.output

    def test_missing_section_fails(self, runner, root, write_note):
        write_note("Daily/2024-01-17.md", "# Wednesday\n")
        write_note("Weekly/2024-W03.md", "# Week 3\n")

        result = invoke(runner, root, "copy-section", "daily", "2024-01-17", "Wins", "--to", "weekly")

        assert result.exit_code == 1
        assert 'No section "Wins"' in result.output


class TestDoneCommand:
    """Tests for `perinotes done`."""

    def test_marks_period_and_children(self, runner, root, write_note):
        note = write_note("Daily/2024-12-17.md", "Review\n")

        result = invoke(runner, root, "done", "monthly", "2024-12-01")

        assert result.exit_code == 0, result.output
        assert "marked done" in result.output
        assert "6 weekly period(s)" in result.output
        assert "31 daily period(s)" in result.output

        reviews = yaml.safe_load((root / ".perinotes" / "done.yaml").read_text(encoding="utf-8"))
        assert reviews["monthly"] == {"2024-12": True}
        assert reviews["weekly"]["2025-W01"] is True
        assert "done: true" in note.read_text(encoding="utf-8")

    def test_undo(self, runner, root):
        invoke(runner, root, "done", "weekly", "2024-12-17")

        result = invoke(runner, root, "done", "weekly", "2024-12-17", "--undo")

        assert result.exit_code == 0, result.output
        assert "marked not done" in result.output
        reviews = yaml.safe_load((root / ".perinotes" / "done.yaml").read_text(encoding="utf-8"))
        assert reviews["weekly"] == {}
        assert reviews["daily"] == {}
