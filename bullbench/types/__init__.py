"""
Type definitions for the benchmark harness.
Contains job, flow and result types, grouped by module.
"""

from bullbench.types.benchmark import (
    BenchmarkResult,
    RunConfiguration,
    RunSummary,
    ScenarioFailure,
)
from bullbench.types.job import (
    FlowNode,
    FlowSpec,
    JobContext,
    JobPayload,
)

__all__ = [
    # Benchmark types
    "BenchmarkResult",
    "RunConfiguration",
    "RunSummary",
    "ScenarioFailure",
    # Job types
    "JobPayload",
    "JobContext",
    "FlowNode",
    "FlowSpec",
]
