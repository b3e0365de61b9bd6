#!/usr/bin/env python3
"""
debounce.py
-----------
Coalesce editor saves.

Every keystroke calls ``schedule``; the save runs once the editor has been
quiet for ``delay`` seconds. A save already running is never cancelled:
a new one waits for it and then runs. ``flush`` forces the scheduled save
now and waits for it; ``cancel`` drops a scheduled save that has not
started.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
from typing import Awaitable, Callable, Optional

# --- Local imports ---
from perinotes.core.exceptions import DocumentStoreError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger

DEFAULT_DELAY = 1.0


class Debouncer:
    """
    Debounced async action.

    Args:
        action: Coroutine function performing the save
        delay: Quiet period in seconds
        on_error: Called with the DocumentStoreError of a failed save
        logger: Optional logger
    """

    def __init__(
        self,
        action: Callable[[], Awaitable[None]],
        delay: float = DEFAULT_DELAY,
        on_error: Optional[Callable[[DocumentStoreError], None]] = None,
        logger: Optional[PerinotesLogger] = None,
    ) -> None:
        self.action = action
        self.delay = delay
        self.on_error = on_error
        self.logger = safe_logger(logger)
        self._timer: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def scheduled(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def in_flight(self) -> bool:
        return self._running is not None and not self._running.done()

    @property
    def pending(self) -> bool:
        """True while a save is scheduled or running."""
        return self.scheduled or self.in_flight

    def schedule(self) -> None:
        """(Re)start the quiet period."""
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._wait())

    def _cancel_timer(self) -> None:
        timer = self._timer
        if timer is not None and not timer.done():
            timer.cancel()

    async def _wait(self) -> None:
        await asyncio.sleep(self.delay)
        self._start()

    def _start(self) -> asyncio.Task:
        previous = self._running
        self._running = asyncio.get_running_loop().create_task(self._execute(previous))
        return self._running

    async def _execute(self, previous: Optional[asyncio.Task]) -> None:
        if previous is not None and not previous.done():
            await previous
        try:
            await self.action()
        except DocumentStoreError as e:
            self.logger.log_error(e, {"operation": "debounced_save"})
            if self.on_error is not None:
                self.on_error(e)

    def cancel(self) -> None:
        """Drop a scheduled save; a running one completes."""
        self._cancel_timer()
        self._timer = None

    async def flush(self) -> None:
        """Run a scheduled save immediately and wait for all saves to finish."""
        if self.scheduled:
            self.cancel()
            self._start()
        running = self._running
        while running is not None and not running.done():
            await running
            running = self._running
