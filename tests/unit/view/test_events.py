"""
Tests for PollingEventSource.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from perinotes.core.exceptions import DocumentStoreError
from perinotes.view.events import PollingEventSource


class Snapshot:
    def __init__(self):
        self.value = 0

    def __call__(self):
        return self.value


class TestPollingEventSource:
    """Tests for PollingEventSource."""

    @pytest.mark.asyncio
    async def test_first_poll_sets_baseline(self):
        callback = MagicMock()
        source = PollingEventSource(Snapshot())
        source.subscribe(callback)
        assert await source.poll_once() is False
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_change_notifies_subscribers(self):
        snapshot = Snapshot()
        sync_callback = MagicMock()
        async_callback = AsyncMock()
        source = PollingEventSource(snapshot)
        source.subscribe(sync_callback)
        source.subscribe(async_callback)

        await source.poll_once()
        assert await source.poll_once() is False
        snapshot.value = 1
        assert await source.poll_once() is True

        sync_callback.assert_called_once_with()
        async_callback.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        snapshot = Snapshot()
        callback = MagicMock()
        source = PollingEventSource(snapshot)
        unsubscribe = source.subscribe(callback)
        await source.poll_once()
        unsubscribe()
        snapshot.value = 1
        assert await source.poll_once() is True
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        snapshot = Snapshot()
        callback = MagicMock()
        source = PollingEventSource(snapshot, interval=0.01)
        source.subscribe(callback)

        source.start()
        assert source.running is True
        await asyncio.sleep(0.03)
        snapshot.value = 1
        await asyncio.sleep(0.05)
        await source.stop()

        assert source.running is False
        callback.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        await PollingEventSource(Snapshot()).stop()


class TestPollingFailures:
    """A failing snapshot or subscriber must not end polling."""

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_stop_others(self):
        snapshot = Snapshot()
        failing = MagicMock(side_effect=DocumentStoreError("read failed"))
        callback = MagicMock()
        source = PollingEventSource(snapshot)
        source.subscribe(failing)
        source.subscribe(callback)

        await source.poll_once()
        snapshot.value = 1
        assert await source.poll_once() is True
        callback.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_failing_snapshot_is_skipped(self):
        values = iter([0, OSError("gone"), 1])

        def flaky():
            value = next(values)
            if isinstance(value, Exception):
                raise value
            return value

        callback = MagicMock()
        source = PollingEventSource(flaky)
        source.subscribe(callback)
        await source.poll_once()
        assert await source.poll_once() is False
        assert await source.poll_once() is True
        callback.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_loop_survives_subscriber_error(self):
        snapshot = Snapshot()
        calls = []

        async def subscriber():
            calls.append(snapshot.value)
            if len(calls) == 1:
                raise DocumentStoreError("read failed")

        source = PollingEventSource(snapshot, interval=0.01)
        source.subscribe(subscriber)
        source.start()
        await asyncio.sleep(0.03)
        snapshot.value = 1
        await asyncio.sleep(0.05)
        assert source.running is True
        snapshot.value = 2
        await asyncio.sleep(0.05)
        await source.stop()

        assert calls == [1, 2]
