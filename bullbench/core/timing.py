"""
Wall-clock timing and throughput calculation.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager


def rate(count: int, elapsed_ms: float) -> float:
    """
    Units per second for a count observed over an elapsed time.

    A zero (or negative) duration is degenerate rather than an error and
    yields 0.0.

    Args:
        count: Number of units handled.
        elapsed_ms: Elapsed time in milliseconds.

    Returns:
        Throughput in units per second.
    """
    if elapsed_ms <= 0:
        return 0.0
    return count / (elapsed_ms / 1000)


class Stopwatch:
    """
    Monotonic stopwatch that can accumulate several laps.

    Each `start`/`stop` pair is one lap; `total_ms` is the sum of all laps,
    which lets chunked work be timed without the time spent between chunks.
    """

    def __init__(self, clock=time.perf_counter):
        self._clock = clock
        self._started_at: float | None = None
        self.total_ms = 0.0
        self.laps = 0

    @property
    def running(self) -> bool:
        """Check if a lap is in progress."""
        return self._started_at is not None

    def start(self) -> None:
        """Begin a lap."""
        if self._started_at is not None:
            raise RuntimeError("Stopwatch already running")
        self._started_at = self._clock()

    def stop(self) -> float:
        """
        End the current lap.

        Returns:
            Elapsed milliseconds of the lap, never negative.
        """
        if self._started_at is None:
            raise RuntimeError("Stopwatch is not running")
        elapsed_ms = max(0.0, (self._clock() - self._started_at) * 1000)
        self._started_at = None
        self.total_ms += elapsed_ms
        self.laps += 1
        return elapsed_ms

    @contextmanager
    def lap(self) -> Iterator["Stopwatch"]:
        """Time the enclosed block as one lap."""
        self.start()
        try:
            yield self
        finally:
            self.stop()
