#!/usr/bin/env python3
"""
sections.py
-----------
Copy a heading section from one periodic note into another.

A review often carries a section ("## Wins", "## Next") up into the week,
month or year above it. The target note gets the section appended to its
own section of the same heading and level when it has one; otherwise the
section is added at the end of the note.

Store failures become a notice and a False result.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from typing import Optional

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError, ValidationError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.notes.creation import note_path
from perinotes.notes.notices import EchoNotifier, Notifier
from perinotes.notes.settings import PeriodicSettings
from perinotes.notes.store import DocumentHandle, DocumentStore
from perinotes.periods.granularity import Granularity
from perinotes.utils.md import (
    MarkdownSection,
    add_section,
    append_to_section,
    find_section,
    section_exists,
)

ERROR_NOTICE_TIMEOUT = 5.0


class SectionCopier:
    """Copy sections between periodic notes of one store."""

    def __init__(
        self,
        store: DocumentStore,
        notifier: Optional[Notifier] = None,
        logger: Optional[PerinotesLogger] = None,
    ) -> None:
        self.store = store
        self.notifier = notifier or EchoNotifier()
        self.logger = safe_logger(logger)

    async def read_section(
        self, handle: DocumentHandle, heading: str, level: Optional[int] = None
    ) -> MarkdownSection:
        """
        Raises:
            ValidationError: If the note has no such section
            DocumentStoreError: If the note cannot be read
        """
        section = find_section(await self.store.read(handle), heading, level)
        if section is None:
            raise ValidationError(f'No section "{heading}" in {handle.basename}')
        return section

    async def copy_to(self, section: MarkdownSection, target: DocumentHandle) -> bool:
        """
        Merge a section into the target note.

        Returns:
            True when the target was written
        """
        try:
            content = await self.store.read(target)
            if section_exists(content, section.heading, section.level):
                await self.store.write(target, append_to_section(content, section, section.content))
                message = f'Appended to "{section.heading}" in {target.basename}'
            else:
                await self.store.write(target, add_section(content, section))
                message = f'Added "{section.heading}" to {target.basename}'
        except DocumentStoreError as e:
            self.logger.log_error(
                e, {"operation": "copy_section", "heading": section.heading, "target": target.path}
            )
            self.notifier.notify("Failed to copy section", ERROR_NOTICE_TIMEOUT)
            return False

        self.notifier.notify(message)
        self.logger.log_operation(
            "copy_section", {"heading": section.heading, "level": section.level, "target": target.path}
        )
        return True

    async def copy_between_periods(
        self,
        settings: PeriodicSettings,
        value: date,
        source: Granularity,
        target: Granularity,
        heading: str,
        level: Optional[int] = None,
    ) -> bool:
        """
        Copy a section from the note of one period to the note of another
        period containing the same date.

        Args:
            settings: Periodic settings (folders and patterns)
            value: Any date in both periods
            source: Granularity of the note holding the section
            target: Granularity of the note receiving it
            heading: Heading text of the section
            level: Heading level; any level when None

        Returns:
            True when the target was written

        Raises:
            ValidationError: If the granularities match, either note is
                missing or the section does not exist
            DocumentStoreError: If the source note cannot be read
        """
        if source is target:
            raise ValidationError("Source and target granularity must differ")

        handles = []
        for granularity in (source, target):
            path = note_path(value, settings.config(granularity), granularity)
            handle = await self.store.get(path)
            if handle is None:
                raise ValidationError(f"{granularity.display_name} note does not exist: {path}")
            handles.append(handle)

        section = await self.read_section(handles[0], heading, level)
        return await self.copy_to(section, handles[1])
