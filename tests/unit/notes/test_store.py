"""
Tests for the local document store.
"""
import pytest

from perinotes.core.exceptions import DocumentStoreError
from perinotes.notes.store import DocumentHandle


class TestDocumentHandle:
    """Tests for DocumentHandle."""

    def test_parts(self):
        handle = DocumentHandle("Journal/Daily/2024-01-15.md")
        assert handle.basename == "2024-01-15"
        assert handle.folder == "Journal/Daily"
        assert str(handle) == "Journal/Daily/2024-01-15.md"
        assert DocumentHandle("top.md").folder == ""


class TestLocalDocumentStore:
    """Tests for LocalDocumentStore."""

    @pytest.mark.asyncio
    async def test_list_is_recursive_and_sorted(self, store, write_note):
        write_note("Daily/2024-01-16.md")
        write_note("Daily/2024/2024-01-15.md")
        write_note("Weekly/2024-W03.md")
        handles = await store.list("Daily")
        paths = [h.path for h in handles]
        assert paths == sorted(paths, key=lambda p: p.split("/"))
        assert set(paths) == {"Daily/2024-01-16.md", "Daily/2024/2024-01-15.md"}

    @pytest.mark.asyncio
    async def test_get_read_write(self, store, write_note):
        write_note("Daily/2024-01-15.md", "old")
        handle = await store.get("Daily/2024-01-15.md")
        assert handle == DocumentHandle("Daily/2024-01-15.md")
        assert await store.get("Daily/2024-01-14.md") is None

        await store.write(handle, "new")
        assert await store.read(handle) == "new"

    @pytest.mark.asyncio
    async def test_create_file_refuses_existing(self, store, write_note):
        write_note("Daily/2024-01-15.md")
        with pytest.raises(DocumentStoreError, match="already exists"):
            await store.create_file("Daily/2024-01-15.md", "")

    @pytest.mark.asyncio
    async def test_create_file_and_folder(self, store, tmp_dir):
        await store.create_folder("Weekly/2024")
        handle = await store.create_file("Weekly/2024/2024-W03.md", "# W3")
        assert (tmp_dir / "Weekly" / "2024").is_dir()
        assert await store.read(handle) == "# W3"

    @pytest.mark.asyncio
    async def test_read_missing_raises(self, store):
        with pytest.raises(DocumentStoreError, match="Failed to read"):
            await store.read(DocumentHandle("Daily/nope.md"))

    @pytest.mark.asyncio
    async def test_paths_cannot_escape_root(self, store):
        with pytest.raises(DocumentStoreError, match="escapes"):
            await store.get("../outside.md")

    def test_fingerprint_changes_with_content(self, store, write_note):
        path = write_note("Daily/2024-01-15.md", "a")
        before = store.fingerprint("Daily")
        write_note("Daily/2024-01-16.md", "b")
        assert store.fingerprint("Daily") != before
        assert len(store.fingerprint()) == 2
        assert path.exists()

    @pytest.mark.asyncio
    async def test_read_undecodable_raises_store_error(self, store, write_note):
        path = write_note("Daily/2024-01-15.md")
        path.write_bytes(b"\xff\xfe\x00broken")
        with pytest.raises(DocumentStoreError, match="Failed to read"):
            await store.read(DocumentHandle("Daily/2024-01-15.md"))
