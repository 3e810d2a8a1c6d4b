"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    write_to_textfile,
)

from bullbench.constants import (
    METRIC_JOBS_TOTAL,
    METRIC_SCENARIO_DURATION,
    METRIC_SCENARIO_FAILURES,
    METRIC_SCENARIO_RATE,
)
from bullbench.types.benchmark import BenchmarkResult

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for benchmark runs.

    Collects metrics for:
    - Jobs handled per scenario
    - Scenario duration
    - Scenario throughput
    - Scenario failures

    Uses its own registry, so a run's metrics can be written out as a
    node-exporter textfile without process-level collectors.
    """

    def __init__(self, runtime: str, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            runtime: Runtime label attached to every sample.
            registry: Optional custom registry. A fresh one is created if not provided.
        """
        self.runtime = runtime
        self._registry = registry or CollectorRegistry()

        self.jobs_total = Counter(
            METRIC_JOBS_TOTAL,
            "Total number of jobs handled by benchmark scenarios",
            ["runtime", "scenario"],
            registry=self._registry,
        )

        self.scenario_duration = Histogram(
            METRIC_SCENARIO_DURATION,
            "Timed phase duration of benchmark scenarios in seconds",
            ["runtime", "scenario"],
            buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
            registry=self._registry,
        )

        self.scenario_rate = Gauge(
            METRIC_SCENARIO_RATE,
            "Throughput of the last run of each scenario in jobs per second",
            ["runtime", "scenario"],
            registry=self._registry,
        )

        self.scenario_failures = Counter(
            METRIC_SCENARIO_FAILURES,
            "Total number of aborted benchmark scenarios",
            ["runtime", "scenario", "error"],
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The registry holding this collector's metrics."""
        return self._registry

    def record_result(self, scenario: str, result: BenchmarkResult) -> None:
        """Record a completed scenario."""
        labels = {"runtime": self.runtime, "scenario": scenario}
        self.jobs_total.labels(**labels).inc(result.jobs)
        self.scenario_duration.labels(**labels).observe(result.time_ms / 1000)
        self.scenario_rate.labels(**labels).set(result.rate)

    def record_failure(self, scenario: str, error: BaseException) -> None:
        """Record an aborted scenario."""
        self.scenario_failures.labels(
            runtime=self.runtime,
            scenario=scenario,
            error=type(error).__name__,
        ).inc()

    def write_textfile(self, path: str) -> None:
        """Write all metrics to a Prometheus textfile."""
        write_to_textfile(path, self._registry)


def setup_metrics(runtime: str) -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Args:
        runtime: Runtime label attached to every sample.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None or _metrics.runtime != runtime:
        _metrics = MetricsCollector(runtime)
    return _metrics

