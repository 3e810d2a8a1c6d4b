"""
Unit tests for completion tracking.
"""

import asyncio
import threading

import pytest

from bullbench.core.completion import CompletionTracker
from bullbench.exceptions import ProcessingIncompleteError


class TestCompletionTracker:
    """Tests for CompletionTracker."""

    @pytest.mark.asyncio
    async def test_signals_at_target(self):
        """Test readiness is signalled when the count reaches the target."""
        tracker = CompletionTracker(3)

        tracker.notify()
        tracker.notify()
        assert tracker.is_done is False

        tracker.notify()
        await tracker.wait(timeout=1.0)

        assert tracker.is_done is True
        assert tracker.observed == 3
        assert tracker.signals == 1

    @pytest.mark.asyncio
    async def test_signals_once(self):
        """Test notifications past the target never signal again."""
        calls: list[int] = []
        tracker = CompletionTracker(2, on_done=lambda: calls.append(1))

        for _ in range(5):
            tracker.notify()

        assert tracker.observed == 5
        assert tracker.signals == 1
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_accepts_listener_arguments(self):
        """Test notify can be used directly as a worker event listener."""
        tracker = CompletionTracker(1)

        tracker.notify(object(), {"processed": 1})

        await tracker.wait(timeout=1.0)
        assert tracker.is_done is True

    @pytest.mark.asyncio
    async def test_zero_expected(self):
        """Test a zero target is ready immediately."""
        calls: list[int] = []
        tracker = CompletionTracker(0, on_done=lambda: calls.append(1))

        await tracker.wait(timeout=0.1)

        assert tracker.signals == 1
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_negative_expected(self):
        """Test a negative target is rejected."""
        with pytest.raises(ValueError):
            CompletionTracker(-1)

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test waiting past the timeout reports what was observed."""
        tracker = CompletionTracker(10)
        for _ in range(4):
            tracker.notify()

        with pytest.raises(ProcessingIncompleteError) as exc_info:
            await tracker.wait(timeout=0.05)

        assert exc_info.value.expected == 10
        assert exc_info.value.observed == 4
        assert "4/10" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_notifications_from_tasks(self):
        """Test notifications from concurrent tasks on the loop."""
        tracker = CompletionTracker(100)

        async def complete() -> None:
            await asyncio.sleep(0)
            tracker.notify()

        waiter = asyncio.ensure_future(tracker.wait(timeout=1.0))
        await asyncio.gather(*(complete() for _ in range(100)))
        await waiter

        assert tracker.observed == 100
        assert tracker.signals == 1

    @pytest.mark.asyncio
    async def test_notifications_from_threads(self):
        """Test 1000 notifications from 10 threads signal exactly once."""
        calls: list[int] = []
        tracker = CompletionTracker(1000, on_done=lambda: calls.append(1))
        barrier = threading.Barrier(10)

        def complete_many() -> None:
            barrier.wait()
            for _ in range(100):
                tracker.notify()

        threads = [threading.Thread(target=complete_many) for _ in range(10)]
        for thread in threads:
            thread.start()

        await tracker.wait(timeout=5.0)

        for thread in threads:
            thread.join()

        assert tracker.observed == 1000
        assert tracker.signals == 1
        assert calls == [1]
