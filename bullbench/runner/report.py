"""
Human-readable and machine-readable benchmark output.

Everything here writes to the report stream (stdout by default). Diagnostics
go through logging, which is configured on stderr, so the last line of
stdout is always the JSON summary record.
"""

import sys
from typing import TextIO

from bullbench.constants import REPORT_NAME_WIDTH, REPORT_NUMBER_WIDTH, REPORT_WIDTH
from bullbench.types.benchmark import BenchmarkResult, RunConfiguration, RunSummary


def format_number(value: float) -> str:
    """Thousands-separated number with at most two decimals."""
    text = f"{value:,.2f}"
    return text.rstrip("0").rstrip(".")


def format_duration(ms: float) -> str:
    """Milliseconds below one second, seconds above."""
    if ms < 1000:
        return f"{ms:.2f}ms"
    return f"{ms / 1000:.2f}s"


def format_result(result: BenchmarkResult) -> str:
    """One aligned report line for a scenario result."""
    return (
        f"  {result.name:<{REPORT_NAME_WIDTH}} "
        f"{result.jobs:>{REPORT_NUMBER_WIDTH}} jobs in "
        f"{format_duration(result.time_ms):>{REPORT_NUMBER_WIDTH + 3}}  "
        f"({format_number(round(result.rate)):>{REPORT_NUMBER_WIDTH + 2}} jobs/sec)"
    )


def summary_record(summary: RunSummary) -> str:
    """Single-line JSON record of the whole run."""
    return summary.model_dump_json()


class Reporter:
    """Writes the benchmark report to a text stream."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream or sys.stdout

    def line(self, text: str = "") -> None:
        """Write one line and flush, so progress shows during long runs."""
        print(text, file=self._stream, flush=True)

    def banner(self, title: str, runtime: str, config: RunConfiguration) -> None:
        """Header with the runtime and the workload configuration."""
        self.line("═" * REPORT_WIDTH)
        self.line(f"{title} - {runtime}")
        self.line("═" * REPORT_WIDTH)
        self.line(f"Jobs for add: {config.jobs_add}")
        self.line(f"Jobs for bulk: {config.jobs_bulk}")
        self.line(f"Jobs for processing: {config.jobs_process}")
        self.line(f"Adds in flight: {config.batch_size}")
        self.line(f"Bulk chunk size: {config.bulk_chunk_size}")
        self.line(f"Worker concurrency: {config.concurrency}")
        self.line(f"Flows: {config.num_flows}")
        self.line("─" * REPORT_WIDTH)

    def progress(self, position: int, total: int, title: str) -> None:
        """Announce the scenario about to run."""
        self.line()
        self.line(f"[{position}/{total}] Benchmarking {title}...")

    def result(self, result: BenchmarkResult) -> None:
        """Report a finished scenario."""
        self.line(format_result(result))

    def failure(self, name: str, error: BaseException) -> None:
        """Report an aborted scenario."""
        self.line(f"  {name:<{REPORT_NAME_WIDTH}} FAILED: {error}")

    def summary(self, summary: RunSummary) -> None:
        """
        Summary table followed by the JSON record.

        The JSON record is always the last line written.
        """
        self.line()
        self.line("═" * REPORT_WIDTH)
        self.line("SUMMARY")
        self.line("═" * REPORT_WIDTH)
        self.line(f"Runtime: {summary.runtime}")
        self.line("─" * REPORT_WIDTH)
        for result in summary.results:
            self.result(result)
        if summary.failure is not None:
            self.line(f"  {summary.failure.name:<{REPORT_NAME_WIDTH}} FAILED: {summary.failure.error}")
        self.line("═" * REPORT_WIDTH)
        self.line()
        self.line("JSON Output (for comparison):")
        self.line(summary_record(summary))
