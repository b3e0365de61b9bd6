"""
Periodic Notes View
-------------------

The reconciled card list.

Modules:
    - reconciler: Diff engine producing edit scripts
    - render_state: Card modes and per-card UI state
    - card: Note cards with state-preserving refresh and debounced saves
    - cursor / editor: Cursor carry-over and the TextEditor protocol
    - debounce: Coalesced async saves
    - overlay / completion: Optimistic done-status updates
    - renderer / events: Render targets and external change polling
    - periodic_view: The pass pipeline tying it all together
"""
