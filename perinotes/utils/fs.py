#!/usr/bin/env python3
"""
fs.py
-------------------
Filesystem utilities for note discovery and folder management.

Functions:
    find_markdown_files: Discover markdown files under a folder
    ensure_dir: Create a folder (and parents) if missing
    relative_note_path: Store-relative POSIX path of a file
    note_basename: File name without the .md extension

Usage:
    from perinotes.utils.fs import find_markdown_files

    files = find_markdown_files(Path("/notes/Journal"))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path, PurePosixPath
from typing import List


def find_markdown_files(directory: Path, pattern: str = "**/*.md") -> List[Path]:
    """Find all markdown files matching pattern, sorted by path."""
    if not directory.exists():
        return []
    return sorted(p for p in directory.glob(pattern) if p.is_file())


def ensure_dir(path: Path) -> Path:
    """Create a directory with parents if it does not exist."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def relative_note_path(path: Path, root: Path) -> str:
    """
    POSIX path of a file relative to the notes root.

    Examples:
        >>> relative_note_path(Path("/notes/Journal/2024-01-15.md"), Path("/notes"))
        'Journal/2024-01-15.md'
    """
    return path.relative_to(root).as_posix()


def note_basename(path: str) -> str:
    """Basename of a store path without its .md extension."""
    name = PurePosixPath(path).name
    return name[:-3] if name.endswith(".md") else name
