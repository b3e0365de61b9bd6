#!/usr/bin/env python3
"""
events.py
---------
External change notifications.

PollingEventSource takes a snapshot (typically LocalDocumentStore.fingerprint)
every ``interval`` seconds in a worker thread and notifies subscribers when
its value changes. A failing snapshot or subscriber is logged and the
polling loop carries on.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
import contextlib
import inspect
from typing import Any, Callable, Hashable, List, Optional

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger

DEFAULT_INTERVAL = 2.0

Subscriber = Callable[[], Any]


class PollingEventSource:
    """
    Change detector driven by a snapshot function.

    Args:
        snapshot: Synchronous callable returning a comparable value
        interval: Seconds between snapshots
        logger: Optional logger
    """

    def __init__(
        self,
        snapshot: Callable[[], Hashable],
        interval: float = DEFAULT_INTERVAL,
        logger: Optional[PerinotesLogger] = None,
    ) -> None:
        self.snapshot = snapshot
        self.interval = interval
        self.logger = safe_logger(logger)
        self._subscribers: List[Subscriber] = []
        self._last: Optional[Hashable] = None
        self._task: Optional[asyncio.Task] = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a (sync or async) callback; returns an unsubscribe callable."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> bool:
        """
        Take one snapshot and notify subscribers if it changed.

        Store and OS errors from the snapshot or from a subscriber are
        logged; the remaining subscribers still run.

        Returns:
            True if a change was detected
        """
        try:
            current = await asyncio.to_thread(self.snapshot)
        except (DocumentStoreError, OSError) as e:
            self.logger.log_error(e, {"operation": "poll_snapshot"})
            return False
        if current == self._last:
            return False
        first = self._last is None
        self._last = current
        if first:
            return False
        self.logger.log_debug("External change detected", {"subscribers": len(self._subscribers)})
        for callback in list(self._subscribers):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except (DocumentStoreError, OSError) as e:
                self.logger.log_error(e, {"operation": "poll_subscriber"})
        return True

    async def _loop(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
