#!/usr/bin/env python3
"""
store.py
--------
Document store interface and a local filesystem implementation.

The rest of the system only holds DocumentHandle references; content is
always read and written through a store. Every store operation is async and
may fail with DocumentStoreError.

Classes:
    DocumentHandle: Reference to a note by its store-relative path
    DocumentStore: Protocol consumed by the notes and view layers
    LocalDocumentStore: Markdown files under a root directory
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Protocol, Tuple

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.utils.fs import ensure_dir, find_markdown_files, note_basename, relative_note_path


@dataclass(frozen=True, order=True)
class DocumentHandle:
    """
    Reference to a note.

    Attributes:
        path: Store-relative POSIX path including the .md extension
    """

    path: str

    @property
    def basename(self) -> str:
        """File name without extension."""
        return note_basename(self.path)

    @property
    def folder(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent

    def __str__(self) -> str:
        return self.path


class DocumentStore(Protocol):
    """Async document store consumed by perinotes."""

    async def list(self, folder: str) -> List[DocumentHandle]:
        ...

    async def get(self, path: str) -> Optional[DocumentHandle]:
        ...

    async def read(self, handle: DocumentHandle) -> str:
        ...

    async def write(self, handle: DocumentHandle, content: str) -> None:
        ...

    async def create_file(self, path: str, content: str) -> DocumentHandle:
        ...

    async def create_folder(self, path: str) -> None:
        ...


class LocalDocumentStore:
    """
    DocumentStore over markdown files in a local directory.

    Blocking filesystem calls run in worker threads via asyncio.to_thread so
    the event loop stays responsive. OSErrors are re-raised as
    DocumentStoreError with the store path in the message.
    """

    def __init__(self, root: Path, logger: Optional[PerinotesLogger] = None) -> None:
        self.root = Path(root)
        self.logger = safe_logger(logger)

    def _resolve(self, path: str) -> Path:
        resolved = (self.root / path).resolve()
        root = self.root.resolve()
        if resolved != root and root not in resolved.parents:
            raise DocumentStoreError(f"Path escapes the notes root: {path}")
        return resolved

    # ----- Queries -----

    def _list_sync(self, folder: str) -> List[DocumentHandle]:
        directory = self._resolve(folder) if folder else self.root
        return [
            DocumentHandle(relative_note_path(p.resolve(), self.root.resolve()))
            for p in find_markdown_files(directory)
        ]

    async def list(self, folder: str) -> List[DocumentHandle]:
        """All markdown notes under a folder, recursively, sorted by path."""
        try:
            return await asyncio.to_thread(self._list_sync, folder)
        except OSError as e:
            raise DocumentStoreError(f"Failed to list {folder or '/'}: {e}") from e

    async def get(self, path: str) -> Optional[DocumentHandle]:
        target = self._resolve(path)
        exists = await asyncio.to_thread(target.is_file)
        return DocumentHandle(path) if exists else None

    async def read(self, handle: DocumentHandle) -> str:
        try:
            return await asyncio.to_thread(
                self._resolve(handle.path).read_text, encoding="utf-8"
            )
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentStoreError(f"Failed to read {handle.path}: {e}") from e

    def fingerprint(self, folder: str = "") -> Tuple[Tuple[str, int], ...]:
        """
        Cheap change marker for a folder: (path, mtime_ns) of every note.

        Used by polling event sources.
        """
        directory = self._resolve(folder) if folder else self.root
        return tuple(
            (p.as_posix(), p.stat().st_mtime_ns) for p in find_markdown_files(directory)
        )

    # ----- Mutations -----

    def _write_sync(self, target: Path, content: str) -> None:
        ensure_dir(target.parent)
        target.write_text(content, encoding="utf-8")

    async def write(self, handle: DocumentHandle, content: str) -> None:
        target = self._resolve(handle.path)
        try:
            await asyncio.to_thread(self._write_sync, target, content)
        except OSError as e:
            self.logger.log_error(e, {"operation": "write", "path": handle.path})
            raise DocumentStoreError(f"Failed to write {handle.path}: {e}") from e
        self.logger.log_debug("Note written", {"path": handle.path, "chars": len(content)})

    def _create_sync(self, target: Path, content: str) -> None:
        ensure_dir(target.parent)
        with target.open("x", encoding="utf-8") as handle:
            handle.write(content)

    async def create_file(self, path: str, content: str) -> DocumentHandle:
        """
        Create a new note.

        Raises:
            DocumentStoreError: If the note already exists or cannot be written
        """
        target = self._resolve(path)
        try:
            await asyncio.to_thread(self._create_sync, target, content)
        except FileExistsError as e:
            raise DocumentStoreError(f"Note already exists: {path}") from e
        except OSError as e:
            self.logger.log_error(e, {"operation": "create_file", "path": path})
            raise DocumentStoreError(f"Failed to create {path}: {e}") from e
        self.logger.log_operation("create_file", {"path": path})
        return DocumentHandle(path)

    async def create_folder(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(ensure_dir, target)
        except OSError as e:
            raise DocumentStoreError(f"Failed to create folder {path}: {e}") from e
