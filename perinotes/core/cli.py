#!/usr/bin/env python3
"""
cli.py
------
Shared CLI utilities and statistics for perinotes commands.

Functions:
    setup_logger: Initialize PerinotesLogger for CLI operations

Classes:
    OperationStats: Base class for all statistics
    ReconcileStats: Structural changes applied by a reconciliation pass

Usage:
    from perinotes.core.cli import setup_logger, ReconcileStats

    logger = setup_logger(log_dir, "view")
    stats = ReconcileStats.from_script(script)
    click.echo(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

# --- Local imports ---
from perinotes.core.logging_manager import PerinotesLogger


# ═══════════════════════════════════════════════════════════════════════════
# LOGGER SETUP
# ═══════════════════════════════════════════════════════════════════════════

def setup_logger(log_dir: Path, component_name: str) -> PerinotesLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a PerinotesLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically state_paths(root)["logs"])
        component_name: Component identifier for logging (e.g. 'cli', 'view')

    Returns:
        Configured PerinotesLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return PerinotesLogger(operations_log_dir, component_name=component_name)


# ═══════════════════════════════════════════════════════════════════════════
# STATISTICS CLASSES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class OperationStats:
    """
    Base class for CLI operation statistics.

    Attributes:
        errors: Number of errors encountered
        start_time: Operation start timestamp
    """
    errors: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate statistics on initialization."""
        if self.errors < 0:
            raise ValueError(f"errors must be non-negative, got {self.errors}")

    def duration(self) -> float:
        """Elapsed seconds since start_time (cached after first call)."""
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    def summary(self) -> str:
        return f"{self.errors} errors, {self.duration():.2f}s"

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": self.errors, "duration": self.duration()}


@dataclass
class ReconcileStats(OperationStats):
    """
    Statistics for a reconciliation pass.

    Attributes:
        created: Cards created (new notes and missing-period placeholders)
        removed: Cards removed
        moved: Cards repositioned
        kept: Cards kept in place with their state
        deferred: Removals postponed because the card holds focus
        missing: Placeholders in the rendered list
    """
    created: int = 0
    removed: int = 0
    moved: int = 0
    kept: int = 0
    deferred: int = 0
    missing: int = 0

    @classmethod
    def from_script(cls, script: Any, missing: int = 0) -> "ReconcileStats":
        """
        Build statistics from an EditScript.

        Args:
            script: EditScript returned by ViewReconciler.reconcile
            missing: Number of placeholders in the rendered sequence

        Returns:
            Populated ReconcileStats
        """
        return cls(
            created=len(script.creates),
            removed=len(script.removes),
            moved=len(script.moves),
            kept=len(script.keeps),
            deferred=len(script.deferred),
            missing=missing,
        )

    def summary(self) -> str:
        return (
            f"{self.created} created, {self.removed} removed, "
            f"{self.moved} moved, {self.kept} kept, "
            f"{self.deferred} deferred, {self.missing} missing"
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "created": self.created,
                "removed": self.removed,
                "moved": self.moved,
                "kept": self.kept,
                "deferred": self.deferred,
                "missing": self.missing,
            }
        )
        return result
