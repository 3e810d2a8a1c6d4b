"""
Core benchmark mechanics.
Contains payload generation, batch scheduling, completion tracking and timing.
"""

from bullbench.core.batching import (
    plan_batches,
    submit_chunks,
    submit_parallel,
    submit_sequential,
)
from bullbench.core.completion import CompletionTracker
from bullbench.core.payloads import PayloadGenerator
from bullbench.core.timing import Stopwatch, rate

__all__ = [
    "plan_batches",
    "submit_sequential",
    "submit_parallel",
    "submit_chunks",
    "CompletionTracker",
    "PayloadGenerator",
    "Stopwatch",
    "rate",
]
