"""
Runner module.
Contains the benchmark scenarios, suites, report output and entry points.
"""

from bullbench.runner.main import BenchmarkRunner, run_comparison, run_quick

__all__ = ["BenchmarkRunner", "run_quick", "run_comparison"]
