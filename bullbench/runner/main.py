"""
Benchmark runner and command line entry points.

The runner executes a suite's scenarios one after another against a shared
queue service, reports each result as it lands and finishes with a summary
whose last line is a JSON record of the whole run.
"""

import asyncio
import logging
import platform
import signal
import sys
from datetime import datetime, timezone

from bullbench.config import get_settings
from bullbench.constants import SPAN_RUN_SCENARIO, SPAN_RUN_SUITE, SuiteName
from bullbench.exceptions import StoreConnectionError
from bullbench.observability.logging import bind_context, clear_context, setup_logging
from bullbench.observability.metrics import MetricsCollector, setup_metrics
from bullbench.observability.tracing import (
    get_tracer,
    set_span_attributes,
    setup_tracing,
    shutdown_tracing,
)
from bullbench.runner.report import Reporter
from bullbench.runner.suites import ScenarioStep, Suite, comparison_suite, quick_suite
from bullbench.store.connection import check_redis
from bullbench.store.service import JobQueueService
from bullbench.types.benchmark import BenchmarkResult, RunSummary, ScenarioFailure

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """
    Runs a benchmark suite.

    Features:
    - Strictly sequential scenarios; each one tears its queues down first
    - The first failing scenario stops the run, earlier results are kept
    - Cooperative stop on SIGTERM/SIGINT
    - One span per scenario and Prometheus metrics per result
    """

    def __init__(
        self,
        suite: Suite,
        service: JobQueueService,
        runtime: str,
        reporter: Reporter | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the runner.

        Args:
            suite: The scenarios to run.
            service: Queue service shared by every scenario.
            runtime: Runtime identifier written into the report.
            reporter: Report writer. Defaults to stdout.
            metrics: Optional metrics collector.
        """
        self.suite = suite
        self.runtime = runtime
        self._service = service
        self._reporter = reporter or Reporter()
        self._metrics = metrics
        self._running = False
        self._current: asyncio.Task | None = None

    async def run(self) -> RunSummary:
        """
        Run every scenario of the suite.

        Returns:
            RunSummary with the results gathered, and the failure if one
            scenario aborted the run.
        """
        self._running = True
        results: list[BenchmarkResult] = []
        failure: ScenarioFailure | None = None

        bind_context(suite=str(self.suite.name), runtime=self.runtime)
        self._reporter.banner(self.suite.title, self.runtime, self.suite.config)

        logger.info(
            "Benchmark starting",
            extra={"scenarios": len(self.suite), "config": self.suite.config.to_dict()},
        )

        try:
            with get_tracer().start_as_current_span(SPAN_RUN_SUITE) as span:
                set_span_attributes(span, suite=self.suite.name, runtime=self.runtime)

                for position, step in enumerate(self.suite.steps, start=1):
                    if not self._running:
                        failure = ScenarioFailure(name=step.name, error="run stopped")
                        break

                    self._reporter.progress(position, len(self.suite), step.title)

                    try:
                        result = await self._run_step(step)
                    except Exception as e:
                        logger.exception(
                            "Scenario failed",
                            extra={"scenario": step.name, "error": str(e)},
                        )
                        self._reporter.failure(step.name, e)
                        if self._metrics is not None:
                            self._metrics.record_failure(step.name, e)
                        failure = ScenarioFailure(name=step.name, error=f"{type(e).__name__}: {e}")
                        break

                    results.append(result)
                    self._reporter.result(result)
                    if self._metrics is not None:
                        self._metrics.record_result(step.name, result)

                set_span_attributes(span, succeeded=failure is None)
        finally:
            self._running = False
            clear_context()

        summary = RunSummary(
            runtime=self.runtime,
            suite=str(self.suite.name),
            timestamp=datetime.now(timezone.utc),
            config=self.suite.config.to_dict(),
            results=results,
            failure=failure,
        )
        self._reporter.summary(summary)

        logger.info(
            "Benchmark finished",
            extra={"completed": len(results), "succeeded": summary.succeeded},
        )
        return summary

    def stop(self) -> None:
        """
        Stop the run gracefully.

        No further scenario starts; the scenario in progress is cancelled
        and still tears its queues down.
        """
        logger.info("Benchmark stopping")
        self._running = False
        if self._current is not None and not self._current.done():
            self._current.cancel()

    async def _run_step(self, step: ScenarioStep) -> BenchmarkResult:
        """Run one scenario inside its own span."""
        with get_tracer().start_as_current_span(SPAN_RUN_SCENARIO) as span:
            set_span_attributes(span, scenario=step.name, title=step.title)

            self._current = asyncio.ensure_future(step.run(self._service))
            try:
                result = await self._current
            except asyncio.CancelledError:
                if self._running:
                    raise
                raise RuntimeError(f"scenario {step.name} cancelled by stop request") from None
            finally:
                self._current = None

            set_span_attributes(span, jobs=result.jobs, time_ms=result.time_ms, rate=result.rate)
            return result


def describe_runtime() -> str:
    """Runtime identifier, e.g. 'CPython 3.12.4'."""
    return f"{platform.python_implementation()} {platform.python_version()}"


def build_suite(suite_name: SuiteName) -> Suite:
    """Build the named suite from the current settings."""
    if suite_name is SuiteName.QUICK:
        return quick_suite()
    return comparison_suite(get_settings().run_configuration())


async def run_async(suite_name: SuiteName) -> int:
    """
    Run a suite end to end.

    Args:
        suite_name: Which suite to run.

    Returns:
        Process exit code: 0 if every scenario completed, 1 otherwise.
    """
    settings = get_settings()
    setup_logging()
    setup_tracing()

    runtime = settings.runtime_label or describe_runtime()
    metrics = setup_metrics(runtime)
    suite = build_suite(suite_name)

    try:
        await check_redis(settings.redis_url)
    except StoreConnectionError:
        logger.exception("Benchmark aborted", extra={"redis_host": settings.redis_host})
        shutdown_tracing()
        return 1

    service = JobQueueService(settings.redis_url)
    runner = BenchmarkRunner(suite, service, runtime, metrics=metrics)

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, runner.stop)

    try:
        summary = await runner.run()
    finally:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)
        await service.close()
        if settings.metrics_textfile:
            metrics.write_textfile(settings.metrics_textfile)
        shutdown_tracing()

    return 0 if summary.succeeded else 1


def run(suite_name: SuiteName) -> None:
    """Run a suite and exit with its status."""
    try:
        exit_code = asyncio.run(run_async(suite_name))
    except Exception:
        logger.exception("Benchmark failed")
        exit_code = 1
    sys.exit(exit_code)


def run_quick() -> None:
    """Entry point for the quick suite."""
    run(SuiteName.QUICK)


def run_comparison() -> None:
    """Entry point for the runtime comparison suite."""
    run(SuiteName.COMPARISON)


if __name__ == "__main__":
    run_comparison()
