"""
Benchmark type definitions.
Results, configuration and the summary record emitted at the end of a run.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bullbench.core.timing import rate


@dataclass(frozen=True)
class RunConfiguration:
    """
    Workload configuration for one benchmark run.
    Read once at start and never mutated.
    """

    jobs_add: int
    jobs_bulk: int
    jobs_process: int
    batch_size: int
    concurrency: int
    bulk_chunk_size: int
    num_flows: int
    processing_timeout_seconds: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for the summary record."""
        return asdict(self)


class BenchmarkResult(BaseModel):
    """
    Outcome of a single scenario.

    The rate is derived from the finalized elapsed time, so results should
    be built with `from_timing` once the stopwatch has been stopped.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    jobs: int = Field(ge=0)
    time_ms: float = Field(ge=0)
    rate: float = Field(ge=0)

    @classmethod
    def from_timing(cls, name: str, jobs: int, time_ms: float) -> "BenchmarkResult":
        """
        Build a result from a unit count and a stopped timer reading.

        Args:
            name: Scenario display name.
            jobs: Number of units the scenario handled.
            time_ms: Elapsed milliseconds of the timed phase.

        Returns:
            BenchmarkResult with the rate computed from the two.
        """
        return cls(name=name, jobs=jobs, time_ms=time_ms, rate=rate(jobs, time_ms))


class ScenarioFailure(BaseModel):
    """Scenario that aborted the run."""

    name: str
    error: str


class RunSummary(BaseModel):
    """
    Machine-readable record of a whole run.
    Printed as the last line of output for cross-runtime comparison.
    """

    runtime: str
    suite: str
    timestamp: datetime
    config: dict[str, Any]
    results: list[BenchmarkResult]
    failure: ScenarioFailure | None = None

    @property
    def succeeded(self) -> bool:
        """Check whether every scenario completed."""
        return self.failure is None
