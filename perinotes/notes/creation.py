#!/usr/bin/env python3
"""
creation.py
-----------
Create periodic notes.

The note path is ``<folder>/<format(period start, pattern)>.md``; patterns
may add subfolders ('YYYY/gggg-[W]ww'). Creation steps:

1. Normalize the date to its period start.
2. Return the existing note if there is one (with a notice).
3. Create the parent folders.
4. Expand the configured template when a template expander is available.
5. Otherwise, or if expansion fails, create an empty note.

Store failures become a notice and a None result.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from pathlib import PurePosixPath
from typing import Any, Dict, Optional, Protocol

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError, TemplateError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.notices import EchoNotifier, Notifier
from perinotes.notes.settings import PeriodConfig
from perinotes.notes.store import DocumentHandle, DocumentStore
from perinotes.periods.granularity import Granularity
from perinotes.periods.period_calendar import period_label, start_of_period
from perinotes.utils.formats import format_date
from perinotes.utils.templates import note_variables, substitute_variables

ERROR_NOTICE_TIMEOUT = 5.0


class TemplateExpander(Protocol):
    async def create_from_template(
        self,
        template_path: str,
        folder: str,
        filename: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Optional[DocumentHandle]:
        ...


class LocalTemplateExpander:
    """
    Expand {{variable}} templates stored in the document store.

    Returns None when the template does not exist; raises TemplateError
    when it exists but cannot be read.
    """

    def __init__(self, store: DocumentStore, logger: Optional[PerinotesLogger] = None) -> None:
        self.store = store
        self.logger = safe_logger(logger)

    async def create_from_template(
        self,
        template_path: str,
        folder: str,
        filename: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Optional[DocumentHandle]:
        template = await self.store.get(template_path)
        if template is None and not template_path.endswith(".md"):
            template = await self.store.get(f"{template_path}.md")
        if template is None:
            self.logger.log_warning("Template not found", {"template": template_path})
            return None

        try:
            text = await self.store.read(template)
        except DocumentStoreError as e:
            raise TemplateError(f"Cannot read template {template_path}: {e}") from e

        content = substitute_variables(text, variables or {})
        path = f"{folder}/{filename}.md" if folder else f"{filename}.md"
        return await self.store.create_file(path, content)


def note_path(value: date, config: PeriodConfig, granularity: Granularity) -> str:
    """Store path of the note for the period containing ``value``."""
    name = format_date(start_of_period(value, granularity), config.naming_pattern)
    return f"{config.folder}/{name}.md" if config.folder else f"{name}.md"


class NoteCreationService:
    """Create (or find) the note of a period."""

    def __init__(
        self,
        store: DocumentStore,
        expander: Optional[TemplateExpander] = None,
        notifier: Optional[Notifier] = None,
        logger: Optional[PerinotesLogger] = None,
    ) -> None:
        self.store = store
        self.expander = expander
        self.notifier = notifier or EchoNotifier()
        self.logger = safe_logger(logger)

    async def _ensure_folder(self, folder: str) -> None:
        """Create a folder and every missing parent, outermost first."""
        if not folder:
            return
        current = ""
        for part in folder.split("/"):
            if not part:
                continue
            current = f"{current}/{part}" if current else part
            await self.store.create_folder(current)

    async def create_periodic_note(
        self, value: date, config: PeriodConfig, granularity: Granularity
    ) -> Optional[DocumentHandle]:
        """
        Create the note for the period containing ``value``.

        Args:
            value: Any date inside the period
            config: Settings of the granularity
            granularity: Period type

        Returns:
            Handle of the new (or existing) note, or None on failure
        """
        start = start_of_period(value, granularity)
        path = note_path(start, config, granularity)
        filename = PurePosixPath(path).stem
        folder = str(PurePosixPath(path).parent)
        folder = "" if folder == "." else folder

        existing = await self.store.get(path)
        if existing is not None:
            self.notifier.notify(f"Note already exists: {filename}")
            return existing

        try:
            await self._ensure_folder(folder)

            if config.template and self.expander is not None:
                handle = await self._from_template(
                    self.expander, config.template, folder, filename, start, granularity
                )
                if handle is not None:
                    self.notifier.notify(f"Created: {filename}")
                    return handle

            handle = await self.store.create_file(path, "")
        except DocumentStoreError as e:
            self.logger.log_error(e, {"operation": "create_periodic_note", "path": path})
            self.notifier.notify(f"Failed to create note: {filename}", ERROR_NOTICE_TIMEOUT)
            return None

        self.notifier.notify(f"Created: {filename}")
        self.logger.log_operation(
            "create_periodic_note", {"path": path, "granularity": granularity.value}
        )
        return handle

    async def _from_template(
        self,
        expander: TemplateExpander,
        template: str,
        folder: str,
        filename: str,
        start: date,
        granularity: Granularity,
    ) -> Optional[DocumentHandle]:
        variables = note_variables(filename, start, period_label(start, granularity))
        try:
            return await expander.create_from_template(template, folder, filename, variables)
        except TemplateError as e:
            self.logger.log_error(e, {"template": template, "filename": filename})
            self.notifier.notify("Failed to apply template", ERROR_NOTICE_TIMEOUT)
            return None
