"""
cursor.py
---------
Cursor placement after an external content replacement.

When a note changes on disk while its editor is open but unfocused, the
editor content is replaced wholesale. The cursor is carried over by
looking for the text that surrounded it:

1. A cursor at the end stays at the end; a cursor at 0 stays at 0.
2. The 20 characters before the cursor are searched (last occurrence) in
   the new content, within 50 characters of slack around the old
   position. A hit is accepted if the 20 characters after the cursor
   follow it (or there are none).
3. Otherwise the characters after the cursor are searched the same way,
   and the cursor lands right before them.
4. Otherwise the old offset is kept, clamped to the new length.
"""
# --- Annotations ---
from __future__ import annotations

CONTEXT_SIZE = 20
SEARCH_SLACK = 50


def calculate_new_cursor_position(old_content: str, new_content: str, old_position: int) -> int:
    """
    Best-effort cursor offset in ``new_content``.

    Examples:
        >>> calculate_new_cursor_position("hello world", "well, hello world", 5)
        11
    """
    if old_position >= len(old_content):
        return len(new_content)
    if old_position <= 0:
        return 0

    before = old_content[max(0, old_position - CONTEXT_SIZE) : old_position]
    after = old_content[old_position : old_position + CONTEXT_SIZE]

    search_start = max(0, old_position - CONTEXT_SIZE - SEARCH_SLACK)
    search_end = min(len(new_content), old_position + CONTEXT_SIZE + SEARCH_SLACK)
    window = new_content[search_start:search_end]

    if before:
        index = window.rfind(before)
        if index != -1:
            position = search_start + index + len(before)
            if not after or new_content[position : position + len(after)] == after:
                return position

    if after:
        index = window.find(after)
        if index != -1:
            return search_start + index

    return min(old_position, len(new_content))
