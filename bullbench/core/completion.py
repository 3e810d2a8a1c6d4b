"""
Completion tracking for worker-driven processing.

Workers report each finished job through `notify`; the benchmark awaits
`wait` to learn when the expected number of jobs has been processed.
"""

import asyncio
import logging
import threading
from collections.abc import Callable

from bullbench.exceptions import ProcessingIncompleteError

logger = logging.getLogger(__name__)


class CompletionTracker:
    """
    Counts completion notifications and signals once when a target is reached.

    Notifications may arrive from the event loop or from other threads; the
    counter is lock-guarded and the done event is always set on the loop that
    owns the tracker. Notifications past the target are still counted but
    never signal again.
    """

    def __init__(
        self,
        expected: int,
        on_done: Callable[[], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """
        Initialize the tracker.

        Args:
            expected: Number of completions to wait for.
            on_done: Optional callback run once when the target is reached.
            loop: Loop that awaits the tracker. Defaults to the running loop.
        """
        if expected < 0:
            raise ValueError(f"expected must be >= 0, got {expected}")

        self.expected = expected
        self._on_done = on_done
        self._loop = loop or asyncio.get_running_loop()
        self._lock = threading.Lock()
        self._done = asyncio.Event()
        self._observed = 0
        self._signals = 0

        if expected == 0:
            self._signal()

    @property
    def observed(self) -> int:
        """Number of completions seen so far."""
        with self._lock:
            return self._observed

    @property
    def signals(self) -> int:
        """Number of times readiness was signalled (0 or 1)."""
        with self._lock:
            return self._signals

    @property
    def is_done(self) -> bool:
        """Check if the expected count has been reached."""
        return self.signals > 0

    def notify(self, *_args: object) -> None:
        """
        Record one completed job.

        Accepts and ignores positional arguments so it can be registered
        directly as a worker event listener.
        """
        with self._lock:
            self._observed += 1
            reached = self._observed == self.expected

        if reached:
            self._signal()

    async def wait(self, timeout: float | None = None) -> None:
        """
        Wait until the expected count is reached.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Raises:
            ProcessingIncompleteError: If the timeout elapses first.
        """
        try:
            await asyncio.wait_for(self._done.wait(), timeout)
        except TimeoutError:
            observed = self.observed
            logger.warning(
                "Processing did not complete in time",
                extra={"expected": self.expected, "observed": observed, "timeout": timeout},
            )
            raise ProcessingIncompleteError(self.expected, observed, timeout) from None

    def _signal(self) -> None:
        with self._lock:
            self._signals += 1

        if self._on_done is not None:
            self._on_done()

        if self._on_loop():
            self._done.set()
        else:
            self._loop.call_soon_threadsafe(self._done.set)

    def _on_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False
