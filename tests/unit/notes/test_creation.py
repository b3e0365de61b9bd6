"""
Tests for periodic note creation.
"""
import pytest
from datetime import date
from unittest.mock import AsyncMock

from perinotes.core.exceptions import DocumentStoreError, TemplateError
from perinotes.notes.creation import LocalTemplateExpander, NoteCreationService, note_path
from perinotes.notes.notices import CollectingNotifier
from perinotes.notes.settings import PeriodConfig
from perinotes.notes.store import DocumentHandle
from perinotes.periods.granularity import Granularity

WEEKLY = PeriodConfig(enabled=True, folder="Weekly", naming_pattern="gggg-[W]ww")


class TestNotePath:
    """Tests for note_path."""

    def test_uses_period_start(self):
        assert note_path(date(2024, 1, 17), WEEKLY, Granularity.WEEKLY) == "Weekly/2024-W03.md"

    def test_pattern_folders_and_no_base_folder(self):
        config = PeriodConfig(enabled=True, folder="", naming_pattern="YYYY/YYYY-MM")
        assert note_path(date(2024, 5, 9), config, Granularity.MONTHLY) == "2024/2024-05.md"


class TestNoteCreationService:
    """Tests for NoteCreationService.create_periodic_note."""

    @pytest.mark.asyncio
    async def test_creates_empty_note(self, store, tmp_dir):
        notifier = CollectingNotifier()
        service = NoteCreationService(store, notifier=notifier)
        handle = await service.create_periodic_note(date(2024, 1, 17), WEEKLY, Granularity.WEEKLY)
        assert handle == DocumentHandle("Weekly/2024-W03.md")
        assert (tmp_dir / "Weekly" / "2024-W03.md").read_text() == ""
        assert notifier.messages == ["Created: 2024-W03"]

    @pytest.mark.asyncio
    async def test_existing_note_short_circuits(self, store, write_note):
        write_note("Weekly/2024-W03.md", "keep me")
        notifier = CollectingNotifier()
        service = NoteCreationService(store, notifier=notifier)
        handle = await service.create_periodic_note(date(2024, 1, 15), WEEKLY, Granularity.WEEKLY)
        assert handle == DocumentHandle("Weekly/2024-W03.md")
        assert await store.read(handle) == "keep me"
        assert notifier.messages == ["Note already exists: 2024-W03"]

    @pytest.mark.asyncio
    async def test_nested_folders_are_created(self, store, tmp_dir):
        config = PeriodConfig(enabled=True, folder="Journal/Weekly", naming_pattern="gggg/gggg-[W]ww")
        service = NoteCreationService(store, notifier=CollectingNotifier())
        handle = await service.create_periodic_note(date(2024, 12, 31), config, Granularity.WEEKLY)
        assert handle.path == "Journal/Weekly/2025/2025-W01.md"
        assert (tmp_dir / "Journal" / "Weekly" / "2025").is_dir()

    @pytest.mark.asyncio
    async def test_template_is_expanded(self, store, write_note):
        write_note("Templates/weekly.md", "# {{title}}\n{{period}} from {{date}}\n")
        config = PeriodConfig(True, "Weekly", "gggg-[W]ww", template="Templates/weekly")
        service = NoteCreationService(store, LocalTemplateExpander(store), CollectingNotifier())
        handle = await service.create_periodic_note(date(2024, 1, 17), config, Granularity.WEEKLY)
        assert await store.read(handle) == "# 2024-W03\nWeek 3, 2024 from 2024-01-15\n"

    @pytest.mark.asyncio
    async def test_missing_template_falls_back_to_empty(self, store):
        config = PeriodConfig(True, "Weekly", "gggg-[W]ww", template="Templates/none.md")
        service = NoteCreationService(store, LocalTemplateExpander(store), CollectingNotifier())
        handle = await service.create_periodic_note(date(2024, 1, 17), config, Granularity.WEEKLY)
        assert await store.read(handle) == ""

    @pytest.mark.asyncio
    async def test_template_error_is_reported_then_falls_back(self, store):
        expander = AsyncMock()
        expander.create_from_template.side_effect = TemplateError("bad template")
        notifier = CollectingNotifier()
        config = PeriodConfig(True, "Weekly", "gggg-[W]ww", template="Templates/weekly.md")
        service = NoteCreationService(store, expander, notifier)

        handle = await service.create_periodic_note(date(2024, 1, 17), config, Granularity.WEEKLY)
        assert handle is not None
        assert notifier.messages == ["Failed to apply template", "Created: 2024-W03"]

    @pytest.mark.asyncio
    async def test_store_failure_shows_notice(self):
        store = AsyncMock()
        store.get.return_value = None
        store.create_file.side_effect = DocumentStoreError("disk full")
        notifier = CollectingNotifier()
        service = NoteCreationService(store, notifier=notifier)

        handle = await service.create_periodic_note(date(2024, 1, 17), WEEKLY, Granularity.WEEKLY)
        assert handle is None
        assert notifier.notices == [("Failed to create note: 2024-W03", 5.0)]
