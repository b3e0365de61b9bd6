"""
conftest.py
-----------
Shared pytest fixtures for perinotes tests.

Provides fixtures for:
- Temporary notes roots
- Periodic settings with every granularity enabled
- A local document store and a note writer
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from perinotes.notes.settings import settings_from_dict
from perinotes.notes.store import LocalDocumentStore


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Settings Fixtures -----

@pytest.fixture
def settings_data():
    """Raw settings with all granularities enabled in their own folder."""
    return {
        "daily": {"enabled": True, "folder": "Daily", "format": "YYYY-MM-DD"},
        "weekly": {"enabled": True, "folder": "Weekly", "format": "gggg-[W]ww"},
        "monthly": {"enabled": True, "folder": "Monthly", "format": "YYYY-MM"},
        "quarterly": {"enabled": True, "folder": "Quarterly", "format": "YYYY-[Q]Q"},
        "yearly": {"enabled": True, "folder": "Yearly", "format": "YYYY"},
        "view": {"mode": "daily", "future_periods": 0, "expand_first": False},
    }


@pytest.fixture
def settings(settings_data):
    """PeriodicSettings built from settings_data."""
    return settings_from_dict(settings_data)


# ----- Store Fixtures -----

@pytest.fixture
def store(tmp_dir):
    """LocalDocumentStore rooted at tmp_dir."""
    return LocalDocumentStore(tmp_dir)


@pytest.fixture
def write_note(tmp_dir):
    """Write a note below tmp_dir and return its path."""

    def _write(relative: str, content: str = "") -> Path:
        path = tmp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
