#!/usr/bin/env python3
"""
reconciler.py
-------------
Incremental reconciliation of the periodic notes card list.

Each pass takes the new merged sequence (real notes and missing-period
placeholders) and diffs it against the cards currently rendered. The
result is an EditScript of structural operations:

- ``remove`` cards whose period left the sequence, and every placeholder
  from the previous pass;
- ``create`` cards for new periods and for every placeholder;
- ``keep`` cards present in both, carrying their RenderState unchanged;
- ``move`` kept cards whose successor is not the expected one.

The card holding focus is never moved or recreated. If its period
disappears, its removal is deferred until a later pass finds it unfocused.

Moves are computed by walking the new sequence backwards. Each card should
sit right before the card processed just before it (its successor in the
new order); when it does not, it is moved there. Deferred cards are
invisible to this check. The focused card is skipped and simply becomes
the anchor for the cards before it.

Operations are listed in application order: removes first, then creates
and moves, each anchored on a card that is already in its final place.
All bookkeeping is done on copies and swapped in at the end of the pass,
so a failed pass leaves the previous state intact.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set

# --- Local imports ---
from perinotes.core.exceptions import ReconciliationError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.periods.merge import MergedItem
from perinotes.periods.period_calendar import PeriodKey
from perinotes.view.render_state import NodeId, RenderState


class OpKind(str, Enum):
    """
    Enumeration of edit operations.
    - CREATE: Mount a new card before an anchor (or at the end)
    - REMOVE: Unmount a card
    - KEEP: Card stays mounted with its state
    - MOVE: Relocate a mounted card before an anchor (or to the end)
    """

    CREATE = "create"
    REMOVE = "remove"
    KEEP = "keep"
    MOVE = "move"


@dataclass(frozen=True)
class EditOp:
    """
    One structural operation.

    Attributes:
        kind: Operation type
        node: Card the operation applies to
        item: Merged item rendered by the card (None for removals)
        state: Card state after the operation (None for removals)
        before: Anchor card for create/move; None means the end of the list
    """

    kind: OpKind
    node: NodeId
    item: Optional[MergedItem] = None
    state: Optional[RenderState] = None
    before: Optional[NodeId] = None


@dataclass
class EditScript:
    """
    Result of a reconciliation pass.

    Attributes:
        ops: Operations in application order
        deferred: Cards whose removal was postponed because they hold focus
        order: Card order after applying the script (deferred cards included)
    """

    ops: List[EditOp] = field(default_factory=list)
    deferred: List[NodeId] = field(default_factory=list)
    order: List[NodeId] = field(default_factory=list)

    def _of(self, kind: OpKind) -> List[EditOp]:
        return [op for op in self.ops if op.kind is kind]

    @property
    def creates(self) -> List[EditOp]:
        return self._of(OpKind.CREATE)

    @property
    def removes(self) -> List[EditOp]:
        return self._of(OpKind.REMOVE)

    @property
    def keeps(self) -> List[EditOp]:
        return self._of(OpKind.KEEP)

    @property
    def moves(self) -> List[EditOp]:
        return self._of(OpKind.MOVE)

    @property
    def structural(self) -> List[EditOp]:
        """Operations that change the rendered list (everything but keeps)."""
        return [op for op in self.ops if op.kind is not OpKind.KEEP]

    def summary(self) -> Dict[str, Any]:
        return {
            "created": len(self.creates),
            "removed": len(self.removes),
            "kept": len(self.keeps),
            "moved": len(self.moves),
            "deferred": len(self.deferred),
        }


def _successor(order: List[NodeId], index: int, skip: Set[NodeId]) -> Optional[NodeId]:
    for node in order[index + 1 :]:
        if node not in skip:
            return node
    return None


class ViewReconciler:
    """
    Owner of the card states and the live card order.

    No other component mutates either; user interactions go through
    ``update_state`` / ``set_focus``.

    Attributes:
        generation: Number of completed passes
    """

    def __init__(self, logger: Optional[PerinotesLogger] = None) -> None:
        self.logger = safe_logger(logger)
        self.generation = 0
        self._states: Dict[PeriodKey, RenderState] = {}
        self._order: List[NodeId] = []
        self._items: Dict[NodeId, MergedItem] = {}
        self._deferred: Set[NodeId] = set()

    # ----- Read access -----

    @property
    def order(self) -> List[NodeId]:
        return list(self._order)

    @property
    def states(self) -> Dict[PeriodKey, RenderState]:
        return dict(self._states)

    def state(self, key: PeriodKey) -> Optional[RenderState]:
        return self._states.get(key)

    def item(self, node: NodeId) -> Optional[MergedItem]:
        return self._items.get(node)

    @property
    def deferred(self) -> List[NodeId]:
        return [node for node in self._order if node in self._deferred]

    @property
    def focused_key(self) -> Optional[PeriodKey]:
        for key, state in self._states.items():
            if state.has_focus:
                return key
        return None

    # ----- User interaction -----

    def update_state(self, key: PeriodKey, **changes: Any) -> RenderState:
        """
        Record a user interaction on a card.

        Raises:
            KeyError: If no real card has this key
        """
        if key not in self._states:
            raise KeyError(f"No card for key {key}")
        new_state = replace(self._states[key], **changes)
        self._states[key] = new_state
        return new_state

    def set_focus(self, key: Optional[PeriodKey]) -> None:
        """Give focus to one card (None clears focus everywhere)."""
        for other, state in self._states.items():
            wanted = other == key
            if state.has_focus != wanted:
                self._states[other] = replace(state, has_focus=wanted)

    # ----- Reconciliation -----

    def reconcile(
        self,
        sequence: Sequence[MergedItem],
        focused_key: Optional[PeriodKey] = None,
        expand_first: bool = False,
    ) -> EditScript:
        """
        Diff the new merged sequence against the rendered cards.

        Args:
            sequence: Ordered merged items, unique keys
            focused_key: Key of the card holding focus; defaults to the card
                whose RenderState has focus
            expand_first: Expand the first card of the sequence if it is created

        Returns:
            EditScript describing the structural changes

        Raises:
            ReconciliationError: If the sequence contains a key twice
        """
        seen: Set[PeriodKey] = set()
        for item in sequence:
            if item.key in seen:
                raise ReconciliationError(f"Duplicate key {item.key} in merged sequence")
            seen.add(item.key)

        if focused_key is None:
            focused_key = self.focused_key
        generation = self.generation + 1
        previous: Set[NodeId] = set(self._order)
        focused = NodeId(focused_key) if focused_key is not None else None
        if focused not in previous:
            focused = None

        # Target nodes. A focused card whose period became a placeholder
        # keeps its slot instead of the placeholder.
        target: List[NodeId] = []
        items: Dict[NodeId, MergedItem] = {}
        for item in sequence:
            if item.is_missing and focused is not None and item.key == focused.key:
                continue
            node = NodeId(item.key, synthetic=True, generation=generation) if item.is_missing else NodeId(item.key)
            target.append(node)
            items[node] = item
        wanted: Set[NodeId] = set(target)

        states = dict(self._states)
        live = list(self._order)
        script = EditScript()

        # Removals, with the focused card deferred
        deferred: Set[NodeId] = set()
        for node in self._order:
            if node in wanted:
                continue
            if node == focused:
                deferred.add(node)
                items[node] = self._items[node]
                continue
            live.remove(node)
            if not node.synthetic:
                states.pop(node.key, None)
            script.ops.append(EditOp(OpKind.REMOVE, node))

        # Keeps carry their state over untouched
        for node in target:
            if node in previous:
                script.ops.append(
                    EditOp(OpKind.KEEP, node, items[node], states.get(node.key, RenderState()))
                )

        # Creates and moves, walking the new order backwards
        expected: Optional[NodeId] = None
        for index in range(len(target) - 1, -1, -1):
            node = target[index]
            if node == focused:
                expected = node
                continue

            if node not in previous:
                state = RenderState(expanded=expand_first and index == 0 and not node.synthetic)
                if not node.synthetic:
                    states[node.key] = state
                self._insert(live, node, expected)
                script.ops.append(EditOp(OpKind.CREATE, node, items[node], state, expected))
            else:
                position = live.index(node)
                if _successor(live, position, deferred) != expected:
                    live.pop(position)
                    self._insert(live, node, expected)
                    script.ops.append(
                        EditOp(OpKind.MOVE, node, items[node], states.get(node.key), expected)
                    )
            expected = node

        script.deferred = [node for node in live if node in deferred]
        script.order = list(live)

        # Swap in the new pass
        self._states = states
        self._order = live
        self._items = {node: items[node] for node in live}
        self._deferred = deferred
        self.generation = generation

        self.logger.log_debug("Reconciliation pass", {"generation": generation, **script.summary()})
        if deferred:
            self.logger.log_debug(
                "Deferred removal of focused card", {"keys": [n.key for n in deferred]}
            )
        return script

    @staticmethod
    def _insert(live: List[NodeId], node: NodeId, before: Optional[NodeId]) -> None:
        if before is None:
            live.append(node)
        else:
            live.insert(live.index(before), node)
