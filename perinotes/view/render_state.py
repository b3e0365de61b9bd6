"""
Render State
------------

Per-card UI state tracked across reconciliation passes.

Enums:
    - CardMode: How a card shows its note (view, edit-preview, edit-source)

Classes:
    - RenderState: expanded / mode / focus snapshot of one card
    - NodeId: Identity of a rendered card
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from enum import Enum
from typing import List

# --- Local imports ---
from perinotes.periods.period_calendar import PeriodKey


class CardMode(str, Enum):
    """
    Enumeration of card display modes.
    - VIEW: Rendered markdown, read-only
    - EDIT_PREVIEW: Editor with live preview
    - EDIT_SOURCE: Editor on the raw markdown source
    """

    VIEW = "view"
    EDIT_PREVIEW = "edit-preview"
    EDIT_SOURCE = "edit-source"

    @classmethod
    def choices(cls) -> List[str]:
        return [mode.value for mode in cls]

    @property
    def is_editable(self) -> bool:
        return self is not CardMode.VIEW

    @property
    def display_name(self) -> str:
        display_map = {
            CardMode.VIEW: "View",
            CardMode.EDIT_PREVIEW: "Live preview",
            CardMode.EDIT_SOURCE: "Source",
        }
        return display_map[self]


@dataclass(frozen=True)
class RenderState:
    """
    Snapshot of one card's UI state.

    Attributes:
        expanded: Whether the card body is shown
        mode: Display mode
        has_focus: Whether the card's editor holds keyboard focus
    """

    expanded: bool = False
    mode: CardMode = CardMode.VIEW
    has_focus: bool = False


@dataclass(frozen=True)
class NodeId:
    """
    Identity of a rendered card.

    Real cards are identified by their period key alone and survive across
    passes. Placeholder cards also carry the pass that created them, so a
    placeholder never matches one from an earlier pass.
    """

    key: PeriodKey
    synthetic: bool = False
    generation: int = 0

    def __str__(self) -> str:
        if self.synthetic:
            return f"missing:{self.key}@{self.generation}"
        return str(self.key)
