"""
Pytest configuration and shared fixtures.
"""

import asyncio
import io
import os
from collections import defaultdict
from collections.abc import AsyncGenerator
from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from bullbench.runner.report import Reporter
from bullbench.store.service import JobHandler, JobQueueService
from bullbench.types.benchmark import RunConfiguration
from bullbench.types.job import FlowSpec, JobContext

# Test Redis location - integration tests skip when it is unreachable
TEST_REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
TEST_REDIS_URL = f"redis://{TEST_REDIS_HOST}:6379/0"


class FakeWorker:
    """In-memory worker pool that drains a fake queue."""

    def __init__(
        self,
        service: "FakeJobQueueService",
        queue_name: str,
        handler: JobHandler,
        concurrency: int,
        on_completed: Any,
    ):
        self._service = service
        self._queue_name = queue_name
        self._handler = handler
        self._semaphore = asyncio.Semaphore(concurrency)
        self._on_completed = on_completed
        self._task: asyncio.Task | None = None
        self.closed = False
        self.processed = 0

    def start(self) -> None:
        self._task = asyncio.ensure_future(self._run())

    async def _run(self) -> None:
        jobs = self._service.queues.pop(self._queue_name, [])
        jobs = jobs[self._service.drop_jobs:]
        await asyncio.gather(*(self._process(name, data) for name, data in jobs))

    async def _process(self, name: str, data: dict[str, Any]) -> None:
        async with self._semaphore:
            context = JobContext(queue_name=self._queue_name, job_id=None, name=name, data=data)
            result = await self._handler(context)
            self.processed += 1
            if self._on_completed is not None:
                self._on_completed(SimpleNamespace(name=name, data=data), result)

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self.closed = True


class FakeJobQueueService:
    """
    In-memory stand-in for JobQueueService.

    Keeps live queue contents (cleared by purge) and a separate submission
    history (never cleared) so tests can inspect what a scenario sent after
    its teardown ran.
    """

    def __init__(self, fail_on_index: int | None = None, drop_jobs: int = 0, fail_purge: bool = False):
        self.fail_on_index = fail_on_index
        self.drop_jobs = drop_jobs
        self.fail_purge = fail_purge
        self.queues: dict[str, list[tuple[str, dict[str, Any]]]] = defaultdict(list)
        self.history: dict[str, list[tuple[str, dict[str, Any]]]] = defaultdict(list)
        self.bulk_calls: list[int] = []
        self.flows: list[FlowSpec] = []
        self.purged: list[str] = []
        self.released: list[str] = []
        self.workers: list[FakeWorker] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    def _store(self, queue_name: str, job_name: str, data: dict[str, Any]) -> None:
        self.queues[queue_name].append((job_name, data))
        self.history[queue_name].append((job_name, data))

    async def submit(self, queue_name: str, job_name: str, data: dict[str, Any]) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_on_index is not None and data.get("index") == self.fail_on_index:
                raise RuntimeError(f"rejected job {data['index']}")
            self._store(queue_name, job_name, data)
        finally:
            self.in_flight -= 1

    async def submit_bulk(self, queue_name: str, jobs: list[tuple[str, dict[str, Any]]]) -> None:
        await asyncio.sleep(0)
        self.bulk_calls.append(len(jobs))
        for job_name, data in jobs:
            self._store(queue_name, job_name, data)

    async def submit_flow(self, flow: FlowSpec) -> None:
        await asyncio.sleep(0)
        self.flows.append(flow)
        self._store(flow.parent.queue_name, flow.parent.name, flow.parent.data)
        for child in flow.children:
            self._store(child.queue_name, child.name, child.data)

    def consume(
        self,
        queue_name: str,
        handler: JobHandler,
        concurrency: int,
        on_completed: Any = None,
    ) -> FakeWorker:
        worker = FakeWorker(self, queue_name, handler, concurrency, on_completed)
        worker.start()
        self.workers.append(worker)
        return worker

    async def purge(self, queue_name: str) -> None:
        self.purged.append(queue_name)
        if self.fail_purge:
            raise ConnectionError(f"cannot purge {queue_name}")
        self.queues.pop(queue_name, None)

    async def count_jobs(self, queue_name: str, *states: str) -> int:
        return len(self.queues.get(queue_name, []))

    async def job_data(self, queue_name: str, *states: str) -> list[dict[str, Any]]:
        return [data for _, data in self.queues.get(queue_name, [])]

    async def release(self, queue_name: str) -> None:
        self.released.append(queue_name)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_service() -> FakeJobQueueService:
    """Create an in-memory queue service."""
    return FakeJobQueueService()


@pytest.fixture
def fake_service_factory():
    """Create in-memory queue services with failure knobs."""
    return FakeJobQueueService


@pytest.fixture
def report_stream() -> io.StringIO:
    """Capture report output."""
    return io.StringIO()


@pytest.fixture
def reporter(report_stream: io.StringIO) -> Reporter:
    """Create a reporter writing to a string buffer."""
    return Reporter(stream=report_stream)


@pytest.fixture
def small_config() -> RunConfiguration:
    """Create a small workload configuration."""
    return RunConfiguration(
        jobs_add=50,
        jobs_bulk=60,
        jobs_process=40,
        batch_size=8,
        concurrency=4,
        bulk_chunk_size=16,
        num_flows=5,
        processing_timeout_seconds=5.0,
    )


@pytest.fixture(scope="session")
def redis_url() -> str:
    """Get the test Redis URL."""
    return TEST_REDIS_URL


@pytest_asyncio.fixture
async def redis_client(redis_url: str) -> AsyncGenerator[aioredis.Redis]:
    """Connect to the test Redis, skipping when it is not running."""
    client = aioredis.from_url(redis_url)
    try:
        await client.ping()
    except (RedisError, OSError):
        await client.aclose()
        pytest.skip(f"Redis not reachable at {redis_url}")

    yield client

    await client.aclose()


@pytest_asyncio.fixture
async def queue_service(redis_client: aioredis.Redis, redis_url: str) -> AsyncGenerator[JobQueueService]:
    """Create a BullMQ-backed queue service against the test Redis."""
    service = JobQueueService(redis_url)

    yield service

    await service.close()


@pytest.fixture
def residual_keys(redis_client: aioredis.Redis):
    """List the Redis keys still held under a key pattern, e.g. a queue's namespace."""

    async def scan(pattern: str) -> list[str]:
        keys = []
        async for key in redis_client.scan_iter(match=pattern, count=1000):
            keys.append(key.decode() if isinstance(key, bytes) else key)
        return keys

    return scan
