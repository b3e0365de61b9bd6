"""
Tests for the incremental view reconciler.
"""
from typing import Iterable, List

import pytest

from perinotes.core.exceptions import ReconciliationError
from perinotes.periods.granularity import Granularity
from perinotes.periods.merge import MergedItem, PeriodRecord
from perinotes.view.reconciler import OpKind, ViewReconciler
from perinotes.view.render_state import CardMode, NodeId, RenderState

A, B, C, D = 4, 3, 2, 1


def seq(keys: Iterable[int], missing: Iterable[int] = ()) -> List[MergedItem]:
    """Merged sequence in the given order; keys in ``missing`` are placeholders."""
    missing = set(missing)
    items = []
    for key in keys:
        record = None if key in missing else PeriodRecord(key, Granularity.DAILY, f"note-{key}")
        items.append(MergedItem(key, Granularity.DAILY, record))
    return items


def ops_for(script, node):
    return [op.kind for op in script.ops if op.node == node]


class TestInitialPass:
    """Tests for the first reconciliation pass."""

    def test_everything_is_created_in_order(self):
        reconciler = ViewReconciler()
        script = reconciler.reconcile(seq([A, B, C]))
        assert [op.node.key for op in script.creates] == [C, B, A]
        assert script.order == [NodeId(A), NodeId(B), NodeId(C)]
        assert reconciler.generation == 1

    def test_creates_are_anchored_on_placed_cards(self):
        script = ViewReconciler().reconcile(seq([A, B]))
        before = {op.node.key: op.before for op in script.creates}
        assert before[B] is None
        assert before[A] == NodeId(B)

    def test_expand_first(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]), expand_first=True)
        assert reconciler.state(A).expanded is True
        assert reconciler.state(B).expanded is False

    def test_expand_first_skips_placeholder(self):
        reconciler = ViewReconciler()
        script = reconciler.reconcile(seq([A, B], missing=[A]), expand_first=True)
        placeholder = next(op for op in script.creates if op.node.synthetic)
        assert placeholder.state.expanded is False
        assert reconciler.state(A) is None

    def test_duplicate_keys_rejected_without_side_effects(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]))
        with pytest.raises(ReconciliationError):
            reconciler.reconcile(seq([A, B, A]))
        assert reconciler.generation == 1
        assert reconciler.order == [NodeId(A), NodeId(B)]


class TestFocusedCard:
    """The focused card is never recreated, removed or moved."""

    def test_reorder_around_focused_card(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B, C]))
        reconciler.update_state(A, expanded=True, mode=CardMode.EDIT_SOURCE)
        reconciler.set_focus(A)

        script = reconciler.reconcile(seq([B, A, D]))

        assert ops_for(script, NodeId(A)) == [OpKind.KEEP]
        assert ops_for(script, NodeId(C)) == [OpKind.REMOVE]
        assert ops_for(script, NodeId(D)) == [OpKind.CREATE]
        moves = script.moves
        assert len(moves) == 1
        assert moves[0].node == NodeId(B)
        assert moves[0].before == NodeId(A)
        assert script.order == [NodeId(B), NodeId(A), NodeId(D)]
        assert reconciler.state(A) == RenderState(
            expanded=True, mode=CardMode.EDIT_SOURCE, has_focus=True
        )

    def test_removal_of_focused_card_is_deferred(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]))
        reconciler.set_focus(A)

        script = reconciler.reconcile(seq([B]))
        assert script.removes == []
        assert script.deferred == [NodeId(A)]
        assert script.order == [NodeId(A), NodeId(B)]
        assert reconciler.state(A).has_focus is True

        reconciler.set_focus(None)
        script = reconciler.reconcile(seq([B]))
        assert [op.node for op in script.removes] == [NodeId(A)]
        assert script.deferred == []
        assert reconciler.order == [NodeId(B)]
        assert reconciler.state(A) is None

    def test_deferred_card_does_not_trigger_moves(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B, C]))
        reconciler.set_focus(B)
        script = reconciler.reconcile(seq([A, C]))
        assert script.moves == []
        assert script.order == [NodeId(A), NodeId(B), NodeId(C)]

    def test_explicit_focused_key_overrides_state(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]))
        script = reconciler.reconcile(seq([B]), focused_key=A)
        assert script.deferred == [NodeId(A)]

    def test_focused_card_keeps_slot_instead_of_placeholder(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]))
        reconciler.set_focus(A)
        script = reconciler.reconcile(seq([A, B], missing=[A]))
        assert not any(op.node.synthetic for op in script.ops)
        assert script.order == [NodeId(A), NodeId(B)]

    def test_unknown_focused_key_is_ignored(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A]))
        script = reconciler.reconcile(seq([B]), focused_key=C)
        assert [op.node for op in script.removes] == [NodeId(A)]


class TestIncrementalPasses:
    """Tests for keeps, moves and placeholders across passes."""

    def test_identical_pass_only_keeps(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B, C]))
        script = reconciler.reconcile(seq([A, B, C]))
        assert script.structural == []
        assert len(script.keeps) == 3

    def test_keeps_carry_state(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]))
        reconciler.update_state(B, expanded=True, mode=CardMode.EDIT_PREVIEW)
        script = reconciler.reconcile(seq([A, B]))
        kept = {op.node.key: op.state for op in script.keeps}
        assert kept[B] == RenderState(expanded=True, mode=CardMode.EDIT_PREVIEW)

    def test_reversal_uses_minimal_moves(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B, C]))
        script = reconciler.reconcile(seq([C, B, A]))
        assert len(script.moves) == 2
        assert script.order == [NodeId(C), NodeId(B), NodeId(A)]

    def test_placeholders_are_recreated_every_pass(self):
        reconciler = ViewReconciler()
        first = reconciler.reconcile(seq([A, B, C], missing=[B]))
        second = reconciler.reconcile(seq([A, B, C], missing=[B]))

        old = NodeId(B, synthetic=True, generation=1)
        new = NodeId(B, synthetic=True, generation=2)
        assert old in first.order
        assert ops_for(second, old) == [OpKind.REMOVE]
        assert ops_for(second, new) == [OpKind.CREATE]
        assert second.order == [NodeId(A), new, NodeId(C)]

    def test_placeholder_replaced_by_real_note(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B], missing=[B]))
        script = reconciler.reconcile(seq([A, B]))
        assert [op.node for op in script.creates] == [NodeId(B)]
        assert script.removes[0].node.synthetic is True
        assert reconciler.state(B) == RenderState()

    def test_item_tracks_latest_record(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A]))
        assert reconciler.item(NodeId(A)).handle == f"note-{A}"
        assert reconciler.item(NodeId(B)) is None

    def test_summary_counts(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B, C]))
        summary = reconciler.reconcile(seq([B, D])).summary()
        assert summary == {"created": 1, "removed": 2, "kept": 1, "moved": 0, "deferred": 0}


class TestStateUpdates:
    """Tests for update_state and set_focus."""

    def test_update_unknown_key_raises(self):
        with pytest.raises(KeyError):
            ViewReconciler().update_state(A, expanded=True)

    def test_set_focus_moves_focus(self):
        reconciler = ViewReconciler()
        reconciler.reconcile(seq([A, B]))
        reconciler.set_focus(A)
        reconciler.set_focus(B)
        assert reconciler.focused_key == B
        assert reconciler.state(A).has_focus is False
