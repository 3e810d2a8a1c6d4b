"""
Batch scheduling for queue submissions.

Splits a run of N units into contiguous batches and drives them into an
async sink, either one unit at a time or one concurrent batch at a time.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from bullbench.exceptions import SubmissionError

logger = logging.getLogger(__name__)

# Type aliases for submission sinks
SubmitUnit = Callable[[int], Awaitable[Any]]
SubmitChunk = Callable[[range], Awaitable[Any]]


def plan_batches(total: int, batch_size: int) -> list[range]:
    """
    Partition `total` units into contiguous batches.

    The last batch holds the remainder when `total` is not a multiple of
    `batch_size`. No batch is empty and the batches cover 0..total-1 exactly.

    Args:
        total: Number of units.
        batch_size: Maximum units per batch.

    Returns:
        List of index ranges, one per batch.

    Raises:
        ValueError: If total is negative or batch_size is not positive.
    """
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    if batch_size <= 0:
        raise ValueError(f"batch_size must be > 0, got {batch_size}")

    return [
        range(start, min(start + batch_size, total))
        for start in range(0, total, batch_size)
    ]


async def submit_sequential(total: int, submit: SubmitUnit) -> int:
    """
    Submit units one at a time, awaiting each before the next.

    Args:
        total: Number of units.
        submit: Coroutine function called with each index.

    Returns:
        Number of units submitted.
    """
    for index in range(total):
        try:
            await submit(index)
        except Exception as e:
            raise SubmissionError(f"Submission of unit {index} failed: {e}", index=index) from e
    return total


async def submit_parallel(total: int, batch_size: int, submit: SubmitUnit) -> int:
    """
    Submit units in concurrent batches.

    Every unit of a batch is issued at once (in index order) and the whole
    batch is awaited before the next one starts, so at most `batch_size`
    submissions are in flight. A failing unit cancels the rest of its batch
    and stops the run; batches already awaited stay submitted.

    Args:
        total: Number of units.
        batch_size: Maximum in-flight submissions.
        submit: Coroutine function called with each index.

    Returns:
        Number of units submitted.
    """
    submitted = 0
    for batch in plan_batches(total, batch_size):
        await _run_batch(batch, submit)
        submitted += len(batch)
    return submitted


async def submit_chunks(total: int, chunk_size: int, submit_chunk: SubmitChunk) -> int:
    """
    Hand each batch to a single chunk-level call (bulk submission).

    Args:
        total: Number of units.
        chunk_size: Units per chunk.
        submit_chunk: Coroutine function called with each index range.

    Returns:
        Number of units submitted.
    """
    submitted = 0
    for chunk in plan_batches(total, chunk_size):
        try:
            await submit_chunk(chunk)
        except Exception as e:
            raise SubmissionError(
                f"Bulk submission of units {chunk.start}..{chunk.stop - 1} failed: {e}",
                index=chunk.start,
            ) from e
        submitted += len(chunk)
    return submitted


async def _run_batch(batch: range, submit: SubmitUnit) -> None:
    """Issue one batch concurrently and surface the first failure."""
    tasks = [asyncio.ensure_future(submit(index)) for index in batch]

    try:
        await asyncio.gather(*tasks)
    except Exception as e:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        failed_index = next(
            (
                index
                for index, task in zip(batch, tasks)
                if not task.cancelled() and task.exception() is e
            ),
            None,
        )
        logger.warning(
            "Batch submission failed",
            extra={"batch_start": batch.start, "batch_size": len(batch), "index": failed_index},
        )
        raise SubmissionError(f"Submission of unit {failed_index} failed: {e}", index=failed_index) from e
