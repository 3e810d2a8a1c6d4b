"""
Benchmark suites.

A suite is an ordered list of scenario steps plus the configuration they
were built from. The runner executes the steps strictly one after another.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import partial

from bullbench.constants import (
    DEFAULT_PROCESSING_TIMEOUT_SECONDS,
    QUICK_CONCURRENCY,
    QUICK_JOBS_ADD,
    QUICK_JOBS_BULK,
    QUICK_JOBS_PROCESS,
    QUICK_NUM_FLOWS,
    SubmitMode,
    SuiteName,
)
from bullbench.runner.scenarios import (
    benchmark_bulk_addition,
    benchmark_flow_producer,
    benchmark_job_addition,
    benchmark_job_processing,
    benchmark_processing_with_work,
)
from bullbench.store.service import JobQueueService
from bullbench.types.benchmark import BenchmarkResult, RunConfiguration

# Type alias for a scenario bound to its parameters
ScenarioRun = Callable[[JobQueueService], Awaitable[BenchmarkResult]]


@dataclass(frozen=True)
class ScenarioStep:
    """One scenario of a suite, ready to run against a queue service."""

    name: str
    title: str
    run: ScenarioRun


@dataclass(frozen=True)
class Suite:
    """Ordered scenario line-up."""

    name: SuiteName
    title: str
    config: RunConfiguration
    steps: list[ScenarioStep] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)


def quick_config() -> RunConfiguration:
    """Fixed, small workload for a fast smoke benchmark."""
    return RunConfiguration(
        jobs_add=QUICK_JOBS_ADD,
        jobs_bulk=QUICK_JOBS_BULK,
        jobs_process=QUICK_JOBS_PROCESS,
        batch_size=1,
        concurrency=QUICK_CONCURRENCY,
        bulk_chunk_size=QUICK_JOBS_BULK,
        num_flows=QUICK_NUM_FLOWS,
        processing_timeout_seconds=DEFAULT_PROCESSING_TIMEOUT_SECONDS,
    )


def quick_suite(config: RunConfiguration | None = None) -> Suite:
    """
    Build the quick suite.

    Adds jobs one awaited call at a time, bulk-adds in a single call,
    processes with a trivial handler and creates flows one at a time.

    Args:
        config: Workload sizes. Defaults to `quick_config()`.

    Returns:
        Suite with four steps.
    """
    config = config or quick_config()
    steps = [
        ScenarioStep(
            name="add",
            title=f"adding jobs individually ({config.jobs_add} jobs)",
            run=partial(
                benchmark_job_addition,
                num_jobs=config.jobs_add,
                batch_size=config.batch_size,
                mode=SubmitMode.SEQUENTIAL,
            ),
        ),
        ScenarioStep(
            name="bulk",
            title=f"bulk adding jobs ({config.jobs_bulk} jobs)",
            run=partial(
                benchmark_bulk_addition,
                num_jobs=config.jobs_bulk,
                chunk_size=config.bulk_chunk_size,
            ),
        ),
        ScenarioStep(
            name="process",
            title=(
                f"processing jobs ({config.jobs_process} jobs, "
                f"concurrency={config.concurrency})"
            ),
            run=partial(
                benchmark_job_processing,
                num_jobs=config.jobs_process,
                concurrency=config.concurrency,
                timeout=config.processing_timeout_seconds,
                chunk_size=config.bulk_chunk_size,
            ),
        ),
        ScenarioStep(
            name="flows",
            title=f"creating flows ({config.num_flows} flows with 2 children each)",
            run=partial(
                benchmark_flow_producer,
                num_flows=config.num_flows,
                mode=SubmitMode.SEQUENTIAL,
            ),
        ),
    ]
    return Suite(name=SuiteName.QUICK, title="BullMQ Benchmark", config=config, steps=steps)


def comparison_suite(config: RunConfiguration) -> Suite:
    """
    Build the runtime comparison suite.

    Args:
        config: Workload sizes, usually from `Settings.run_configuration()`.

    Returns:
        Suite with five steps.
    """
    steps = [
        ScenarioStep(
            name="add",
            title=f"job addition ({config.batch_size} parallel)",
            run=partial(
                benchmark_job_addition,
                num_jobs=config.jobs_add,
                batch_size=config.batch_size,
                mode=SubmitMode.PARALLEL,
            ),
        ),
        ScenarioStep(
            name="bulk",
            title="bulk addition",
            run=partial(
                benchmark_bulk_addition,
                num_jobs=config.jobs_bulk,
                chunk_size=config.bulk_chunk_size,
            ),
        ),
        ScenarioStep(
            name="process",
            title="job processing",
            run=partial(
                benchmark_job_processing,
                num_jobs=config.jobs_process,
                concurrency=config.concurrency,
                timeout=config.processing_timeout_seconds,
                chunk_size=config.bulk_chunk_size,
            ),
        ),
        ScenarioStep(
            name="work",
            title="processing with CPU work",
            run=partial(
                benchmark_processing_with_work,
                num_jobs=config.jobs_process,
                concurrency=config.concurrency,
                timeout=config.processing_timeout_seconds,
                chunk_size=config.bulk_chunk_size,
            ),
        ),
        ScenarioStep(
            name="flows",
            title="flow producer",
            run=partial(
                benchmark_flow_producer,
                num_flows=config.num_flows,
                mode=SubmitMode.PARALLEL,
            ),
        ),
    ]
    return Suite(
        name=SuiteName.COMPARISON,
        title="BullMQ Runtime Benchmark",
        config=config,
        steps=steps,
    )
