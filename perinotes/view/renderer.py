"""
renderer.py
-----------
Where reconciliation results end up.

The view applies each structural operation of an EditScript to a
CardRenderer. ListRenderer keeps the rendered list in memory; it backs the
CLI output and the tests.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Dict, List, Optional, Protocol, Tuple

# --- Local imports ---
from perinotes.periods.period_calendar import key_to_date, period_label
from perinotes.view.card import NoteCard
from perinotes.view.render_state import NodeId


class CardRenderer(Protocol):
    def create(self, node: NodeId, card: NoteCard, before: Optional[NodeId]) -> None:
        ...

    def remove(self, node: NodeId) -> None:
        ...

    def move(self, node: NodeId, before: Optional[NodeId]) -> None:
        ...

    def update_content(self, node: NodeId, content: str) -> None:
        ...

    def show_empty_state(self, message: Optional[str]) -> None:
        ...


class ListRenderer:
    """
    In-memory CardRenderer.

    Attributes:
        nodes: Rendered order
        cards: Card behind each node
        contents: Last content pushed for each node
        empty_message: Message shown when the list is empty, else None
        history: Every call as (operation, node)
    """

    def __init__(self) -> None:
        self.nodes: List[NodeId] = []
        self.cards: Dict[NodeId, NoteCard] = {}
        self.contents: Dict[NodeId, str] = {}
        self.empty_message: Optional[str] = None
        self.history: List[Tuple[str, NodeId]] = []

    def _place(self, node: NodeId, before: Optional[NodeId]) -> None:
        if before is None:
            self.nodes.append(node)
        else:
            self.nodes.insert(self.nodes.index(before), node)

    def create(self, node: NodeId, card: NoteCard, before: Optional[NodeId]) -> None:
        self._place(node, before)
        self.cards[node] = card
        self.history.append(("create", node))

    def remove(self, node: NodeId) -> None:
        self.nodes.remove(node)
        self.cards.pop(node, None)
        self.contents.pop(node, None)
        self.history.append(("remove", node))

    def move(self, node: NodeId, before: Optional[NodeId]) -> None:
        self.nodes.remove(node)
        self._place(node, before)
        self.history.append(("move", node))

    def update_content(self, node: NodeId, content: str) -> None:
        self.contents[node] = content
        self.history.append(("update", node))

    def show_empty_state(self, message: Optional[str]) -> None:
        self.empty_message = message

    def operations(self, node: NodeId) -> List[str]:
        """Operations applied to one node, in order."""
        return [operation for operation, target in self.history if target == node]

    def lines(self) -> List[str]:
        """Plain-text rendering of the list, one card per line."""
        if not self.nodes:
            return [self.empty_message] if self.empty_message else []
        rendered = []
        for node in self.nodes:
            card = self.cards[node]
            label = period_label(key_to_date(node.key), card.item.granularity)
            if card.is_placeholder:
                rendered.append(f"  + {label} (missing)")
                continue
            marker = "▾" if card.state.expanded else "▸"
            done = " ✓" if card.is_done else ""
            rendered.append(f"  {marker} {label}{done}  {card.item.handle}")
        return rendered
