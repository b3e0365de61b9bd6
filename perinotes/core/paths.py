#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the perinotes project.

A notes root ("vault") holds the markdown tree. Tool state lives in a hidden
directory inside it:

    ROOT/
    ├── <periodic note folders>
    └── .perinotes/
        ├── settings.yaml    # Per-granularity settings and view options
        ├── done.yaml        # Done-review bookkeeping
        └── logs/            # Application logs

ROOT is taken from the PERINOTES_HOME environment variable when set, and
from the current working directory otherwise. CLI options can override
every path at runtime.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine the notes root directory.

    Returns:
        Path object for the notes root
    """
    env_root = os.environ.get("PERINOTES_HOME")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path.cwd()


# ----- Notes root -----
ROOT: Path = _get_project_root()

# ---- Tool state ----
STATE_DIR_NAME = ".perinotes"


def state_paths(root: Path) -> dict:
    """
    Resolve the tool state paths for an arbitrary notes root.

    Args:
        root: Notes root directory

    Returns:
        Dictionary with 'config', 'data' and 'logs' paths
    """
    state = Path(root) / STATE_DIR_NAME
    return {
        "config": state / "settings.yaml",
        "data": state / "done.yaml",
        "logs": state / "logs",
    }
