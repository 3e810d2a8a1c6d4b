"""
Job queue service.
Thin adapter over the BullMQ library exposing only what the benchmarks use.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any

from bullmq import FlowProducer, Job, Queue, Worker

from bullbench.constants import PENDING_JOB_STATES
from bullbench.types.job import FlowSpec, JobContext

logger = logging.getLogger(__name__)

# Type alias for workload handler functions
JobHandler = Callable[[JobContext], Awaitable[Any]]


class JobQueueService:
    """
    Queue operations backed by BullMQ.

    Caches one Queue per name and a single FlowProducer. Every BullMQ object
    is built from the same Redis URL and owns its own connection; `release`
    and `close` may be called at any time, including after a partial failure.
    """

    def __init__(self, connection: str):
        """
        Initialize the service.

        Args:
            connection: Redis URL handed to BullMQ.
        """
        self._connection = connection
        self._queues: dict[str, Queue] = {}
        self._flow_producer: FlowProducer | None = None

    def queue(self, queue_name: str) -> Queue:
        """Get or create the Queue handle for a name."""
        queue = self._queues.get(queue_name)
        if queue is None:
            queue = Queue(queue_name, {"connection": self._connection})
            self._queues[queue_name] = queue
        return queue

    async def submit(self, queue_name: str, job_name: str, data: dict[str, Any]) -> Job:
        """Add a single job."""
        return await self.queue(queue_name).add(job_name, data)

    async def submit_bulk(
        self,
        queue_name: str,
        jobs: Sequence[tuple[str, dict[str, Any]]],
    ) -> list[Job]:
        """Add many jobs in one atomic call."""
        return await self.queue(queue_name).addBulk(
            [{"name": name, "data": data} for name, data in jobs]
        )

    async def submit_flow(self, flow: FlowSpec) -> Any:
        """Add a parent job and its children in one atomic call."""
        if self._flow_producer is None:
            self._flow_producer = FlowProducer(self._connection)
        return await self._flow_producer.add(flow.to_flow())

    def consume(
        self,
        queue_name: str,
        handler: JobHandler,
        concurrency: int,
        on_completed: Callable[..., None] | None = None,
    ) -> Worker:
        """
        Start a worker pool on a queue.

        Must be called from a running event loop; BullMQ starts the worker
        straight away.

        Args:
            queue_name: Queue to consume.
            handler: Workload handler run once per job.
            concurrency: Jobs processed at the same time.
            on_completed: Listener for each job's completion event.

        Returns:
            Worker: The pool handle; close it to stop consuming.
        """

        async def process(job: Job, token: str) -> Any:
            context = JobContext(
                queue_name=queue_name,
                job_id=job.id,
                name=job.name,
                data=job.data or {},
            )
            return await handler(context)

        worker = Worker(
            queue_name,
            process,
            {"connection": self._connection, "concurrency": concurrency},
        )

        if on_completed is not None:
            worker.on("completed", on_completed)
        worker.on("failed", _log_failed_job)

        logger.info(
            "Worker started",
            extra={"queue": queue_name, "concurrency": concurrency},
        )
        return worker

    async def purge(self, queue_name: str) -> None:
        """
        Destroy everything stored for a queue.
        Idempotent; purging an empty or unknown queue is a no-op.
        """
        await self.queue(queue_name).obliterate(force=True)

    async def count_jobs(self, queue_name: str, *states: str) -> int:
        """
        Count jobs in the given states.

        Args:
            queue_name: Queue to inspect.
            *states: Job states. Defaults to every not-yet-processed state.

        Returns:
            Total number of jobs in those states.
        """
        counts = await self.queue(queue_name).getJobCounts(*(states or PENDING_JOB_STATES))
        return sum(int(value) for value in counts.values())

    async def job_data(self, queue_name: str, *states: str) -> list[dict[str, Any]]:
        """Fetch the data of every job in the given states."""
        jobs = await self.queue(queue_name).getJobs(list(states or PENDING_JOB_STATES))
        return [job.data for job in jobs]

    async def release(self, queue_name: str) -> None:
        """Close and forget the Queue handle for a name."""
        queue = self._queues.pop(queue_name, None)
        if queue is not None:
            await queue.close()

    async def close(self) -> None:
        """Close every handle the service opened."""
        for queue_name in list(self._queues):
            await self.release(queue_name)

        if self._flow_producer is not None:
            await self._flow_producer.close()
            self._flow_producer = None


@asynccontextmanager
async def queue_scope(
    service: JobQueueService,
    *queue_names: str,
) -> AsyncGenerator[JobQueueService]:
    """
    Scope a scenario's queues.

    Purges the queues before use and always purges and releases them on the
    way out, including when the setup purge itself fails. A teardown error
    is logged and does not hide an error raised inside the scope.

    Args:
        service: The queue service.
        *queue_names: Queues owned by the scenario.

    Yields:
        JobQueueService: The same service, for convenience.
    """
    failed = False
    try:
        for queue_name in queue_names:
            await service.purge(queue_name)

        yield service
    except BaseException:
        failed = True
        raise
    finally:
        teardown_error: Exception | None = None
        for queue_name in queue_names:
            try:
                await service.purge(queue_name)
            except Exception as e:
                logger.exception("Failed to tear down queue", extra={"queue": queue_name})
                teardown_error = teardown_error or e
            finally:
                await service.release(queue_name)

        if teardown_error is not None and not failed:
            raise teardown_error


async def close_worker(worker: Worker | None) -> None:
    """Close a worker pool if one was started."""
    if worker is not None:
        await worker.close()


def _log_failed_job(job: Job, error: Exception, *_args: Any) -> None:
    logger.warning(
        "Job failed",
        extra={"job_id": getattr(job, "id", None), "error": str(error)},
    )
