"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class SubmitMode(StrEnum):
    """How a scenario hands its units to the queue."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class SuiteName(StrEnum):
    """Benchmark line-ups exposed as command line entry points."""

    QUICK = "quick"
    COMPARISON = "comparison"


# Default workload sizes for the comparison suite
DEFAULT_JOBS_ADD = 100_000
DEFAULT_JOBS_PROCESS = 100_000
DEFAULT_BATCH_SIZE = 1000
DEFAULT_CONCURRENCY = 100
DEFAULT_BULK_CHUNK_SIZE = 10_000
DEFAULT_PROCESSING_TIMEOUT_SECONDS = 300.0

# Quick suite sizes
QUICK_JOBS_ADD = 1000
QUICK_JOBS_BULK = 5000
QUICK_JOBS_PROCESS = 1000
QUICK_CONCURRENCY = 10
QUICK_NUM_FLOWS = 100

# Payload shape
FILLER_LENGTH = 100
FILLER_CHAR = "x"
JOB_NAME = "test-job"
PARENT_JOB_NAME = "parent-job"
CHILD_JOB_NAMES = ("child-1", "child-2")

# CPU workload
FIBONACCI_N = 20

# Workload handler names
HANDLER_NOOP = "noop"
HANDLER_FIBONACCI = "fibonacci"

# Queue name prefixes
QUEUE_PREFIX_ADD = "bench-add"
QUEUE_PREFIX_BULK = "bench-bulk"
QUEUE_PREFIX_PROCESS = "bench-process"
QUEUE_PREFIX_WORK = "bench-work"
QUEUE_PREFIX_FLOW = "bench-flow"
QUEUE_PREFIX_FLOW_CHILD = "bench-flow-child"

# Job states counted when inspecting a queue
PENDING_JOB_STATES = ("waiting", "waiting-children", "delayed", "prioritized", "paused")

# Metrics names
METRIC_JOBS_TOTAL = "bench_jobs_total"
METRIC_SCENARIO_DURATION = "bench_scenario_duration_seconds"
METRIC_SCENARIO_RATE = "bench_scenario_jobs_per_second"
METRIC_SCENARIO_FAILURES = "bench_scenario_failures_total"

# Trace span names
SPAN_RUN_SUITE = "run_suite"
SPAN_RUN_SCENARIO = "run_scenario"

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ("bullmq", "redis")

# Report layout
REPORT_WIDTH = 80
REPORT_NAME_WIDTH = 45
REPORT_NUMBER_WIDTH = 6
