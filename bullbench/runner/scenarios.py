"""
Benchmark scenarios.

Each scenario owns uniquely named queues, runs an untimed setup, times one
workload shape against the queue and tears its queues down before returning
exactly one BenchmarkResult.
"""

import logging
import time

from bullbench.constants import (
    DEFAULT_BULK_CHUNK_SIZE,
    HANDLER_FIBONACCI,
    HANDLER_NOOP,
    JOB_NAME,
    QUEUE_PREFIX_ADD,
    QUEUE_PREFIX_BULK,
    QUEUE_PREFIX_FLOW,
    QUEUE_PREFIX_FLOW_CHILD,
    QUEUE_PREFIX_PROCESS,
    QUEUE_PREFIX_WORK,
    SubmitMode,
)
from bullbench.core.batching import submit_chunks, submit_parallel, submit_sequential
from bullbench.core.completion import CompletionTracker
from bullbench.core.payloads import PayloadGenerator
from bullbench.core.timing import Stopwatch
from bullbench.runner.handlers import get_handler
from bullbench.store.service import JobQueueService, close_worker, queue_scope
from bullbench.types.benchmark import BenchmarkResult

logger = logging.getLogger(__name__)


def unique_queue_name(prefix: str) -> str:
    """Queue name stamped with the current epoch milliseconds."""
    return f"{prefix}-{int(time.time() * 1000)}"


async def benchmark_job_addition(
    service: JobQueueService,
    num_jobs: int,
    batch_size: int,
    mode: SubmitMode = SubmitMode.PARALLEL,
    generator: PayloadGenerator | None = None,
) -> BenchmarkResult:
    """
    Time adding jobs one `Queue.add` call at a time.

    Args:
        service: The queue service.
        num_jobs: Jobs to add.
        batch_size: Concurrent adds per batch in parallel mode.
        mode: Await each add in turn, or batch them concurrently.
        generator: Payload generator.

    Returns:
        BenchmarkResult for the addition phase.
    """
    generator = generator or PayloadGenerator()
    queue_name = unique_queue_name(QUEUE_PREFIX_ADD)
    stopwatch = Stopwatch()

    async def add(index: int) -> None:
        await service.submit(queue_name, JOB_NAME, generator.generate(index).to_data())

    async with queue_scope(service, queue_name):
        with stopwatch.lap():
            if mode is SubmitMode.SEQUENTIAL:
                await submit_sequential(num_jobs, add)
            else:
                await submit_parallel(num_jobs, batch_size, add)

    if mode is SubmitMode.SEQUENTIAL:
        name = "Job Addition (sequential)"
    else:
        name = f"Job Addition ({batch_size} parallel)"
    return BenchmarkResult.from_timing(name, num_jobs, stopwatch.total_ms)


async def benchmark_bulk_addition(
    service: JobQueueService,
    num_jobs: int,
    chunk_size: int = DEFAULT_BULK_CHUNK_SIZE,
    generator: PayloadGenerator | None = None,
) -> BenchmarkResult:
    """
    Time adding jobs through `Queue.addBulk`, one call per chunk.

    Only the bulk calls are timed; building each chunk's payloads is not.

    Args:
        service: The queue service.
        num_jobs: Jobs to add.
        chunk_size: Jobs per bulk call.
        generator: Payload generator.

    Returns:
        BenchmarkResult for the bulk addition phase.
    """
    generator = generator or PayloadGenerator()
    queue_name = unique_queue_name(QUEUE_PREFIX_BULK)
    stopwatch = Stopwatch()

    async def add_chunk(chunk: range) -> None:
        jobs = [(JOB_NAME, payload.to_data()) for payload in generator.generate_range(chunk)]
        with stopwatch.lap():
            await service.submit_bulk(queue_name, jobs)

    async with queue_scope(service, queue_name):
        await submit_chunks(num_jobs, chunk_size, add_chunk)

    logger.debug(
        "Bulk addition finished",
        extra={"queue": queue_name, "chunks": stopwatch.laps},
    )
    return BenchmarkResult.from_timing(
        "Bulk Addition (Queue.addBulk)", num_jobs, stopwatch.total_ms
    )


async def benchmark_job_processing(
    service: JobQueueService,
    num_jobs: int,
    concurrency: int,
    timeout: float | None = None,
    chunk_size: int = DEFAULT_BULK_CHUNK_SIZE,
    generator: PayloadGenerator | None = None,
) -> BenchmarkResult:
    """
    Time a worker pool draining pre-loaded jobs with a trivial handler.

    Args:
        service: The queue service.
        num_jobs: Jobs to pre-load and process.
        concurrency: Worker concurrency.
        timeout: Seconds to wait for every job to complete.
        chunk_size: Jobs per bulk call while pre-loading.
        generator: Payload generator.

    Returns:
        BenchmarkResult for the processing phase.
    """
    return await _benchmark_processing(
        service,
        name=f"Job Processing (concurrency={concurrency})",
        queue_prefix=QUEUE_PREFIX_PROCESS,
        handler_name=HANDLER_NOOP,
        num_jobs=num_jobs,
        concurrency=concurrency,
        timeout=timeout,
        chunk_size=chunk_size,
        generator=generator,
    )


async def benchmark_processing_with_work(
    service: JobQueueService,
    num_jobs: int,
    concurrency: int,
    timeout: float | None = None,
    chunk_size: int = DEFAULT_BULK_CHUNK_SIZE,
    generator: PayloadGenerator | None = None,
) -> BenchmarkResult:
    """Same as `benchmark_job_processing` with a CPU-bound handler."""
    return await _benchmark_processing(
        service,
        name=f"Processing with CPU Work (concurrency={concurrency})",
        queue_prefix=QUEUE_PREFIX_WORK,
        handler_name=HANDLER_FIBONACCI,
        num_jobs=num_jobs,
        concurrency=concurrency,
        timeout=timeout,
        chunk_size=chunk_size,
        generator=generator,
    )


async def benchmark_flow_producer(
    service: JobQueueService,
    num_flows: int,
    mode: SubmitMode = SubmitMode.PARALLEL,
    generator: PayloadGenerator | None = None,
) -> BenchmarkResult:
    """
    Time creating parent + two children flows.

    In parallel mode every flow is submitted at once.

    Args:
        service: The queue service.
        num_flows: Flows to create.
        mode: Await each flow in turn, or submit them all concurrently.
        generator: Payload generator.

    Returns:
        BenchmarkResult counting three jobs per flow.
    """
    generator = generator or PayloadGenerator()
    parent_queue = unique_queue_name(QUEUE_PREFIX_FLOW)
    child_queue = unique_queue_name(QUEUE_PREFIX_FLOW_CHILD)
    stopwatch = Stopwatch()
    units = 0

    async def add_flow(index: int) -> None:
        nonlocal units
        flow = generator.flow(index, parent_queue=parent_queue, child_queue=child_queue)
        await service.submit_flow(flow)
        units += flow.unit_count

    async with queue_scope(service, parent_queue, child_queue):
        with stopwatch.lap():
            if mode is SubmitMode.SEQUENTIAL:
                await submit_sequential(num_flows, add_flow)
            else:
                await submit_parallel(num_flows, max(num_flows, 1), add_flow)

    return BenchmarkResult.from_timing(
        "Flow Producer (parent + 2 children)", units, stopwatch.total_ms
    )


async def _benchmark_processing(
    service: JobQueueService,
    name: str,
    queue_prefix: str,
    handler_name: str,
    num_jobs: int,
    concurrency: int,
    timeout: float | None,
    chunk_size: int,
    generator: PayloadGenerator | None,
) -> BenchmarkResult:
    generator = generator or PayloadGenerator()
    handler = get_handler(handler_name)
    queue_name = unique_queue_name(queue_prefix)
    stopwatch = Stopwatch()

    async def preload(chunk: range) -> None:
        jobs = [
            (JOB_NAME, payload.to_data(include_filler=False))
            for payload in generator.generate_range(chunk)
        ]
        await service.submit_bulk(queue_name, jobs)

    async with queue_scope(service, queue_name):
        await submit_chunks(num_jobs, chunk_size, preload)
        logger.info(
            "Pre-loaded jobs",
            extra={"queue": queue_name, "jobs": num_jobs, "handler": handler_name},
        )

        worker = None
        stopwatch.start()
        # The timer stops inside the tracker, at the exact completion that
        # reaches the target.
        tracker = CompletionTracker(num_jobs, on_done=stopwatch.stop)
        try:
            worker = service.consume(
                queue_name,
                handler,
                concurrency,
                on_completed=tracker.notify,
            )
            await tracker.wait(timeout)
        finally:
            await close_worker(worker)

    return BenchmarkResult.from_timing(name, num_jobs, stopwatch.total_ms)
