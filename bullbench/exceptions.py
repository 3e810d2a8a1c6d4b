"""
Exceptions raised by the benchmark harness.
"""


class BenchmarkError(Exception):
    """Base class for harness failures."""


class StoreConnectionError(BenchmarkError):
    """Raised when the Redis store cannot be reached."""


class SubmissionError(BenchmarkError):
    """
    Raised when the queue rejects or fails a submission.
    The underlying library exception is chained as the cause.
    """

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class ProcessingIncompleteError(BenchmarkError):
    """Raised when workers do not complete every job within the allowed time."""

    def __init__(self, expected: int, observed: int, timeout: float):
        super().__init__(
            f"processing incomplete: {observed}/{expected} jobs completed "
            f"within {timeout:.1f}s"
        )
        self.expected = expected
        self.observed = observed
        self.timeout = timeout
