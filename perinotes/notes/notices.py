"""
notices.py
----------
User-visible notices.

Recoverable failures (a note that could not be created, a done flag that
could not be saved) are reported to the user through a Notifier rather
than raised.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import List, Optional, Protocol, Tuple

# --- Third party imports ---
import click


class Notifier(Protocol):
    def notify(self, message: str, timeout: Optional[float] = None) -> None:
        ...


class EchoNotifier:
    """Print notices to the terminal; errors (with a timeout) go to stderr."""

    def notify(self, message: str, timeout: Optional[float] = None) -> None:
        click.echo(message, err=timeout is not None)


class CollectingNotifier:
    """Keep notices in memory, for headless runs and summaries."""

    def __init__(self) -> None:
        self.notices: List[Tuple[str, Optional[float]]] = []

    def notify(self, message: str, timeout: Optional[float] = None) -> None:
        self.notices.append((message, timeout))

    @property
    def messages(self) -> List[str]:
        return [message for message, _ in self.notices]
