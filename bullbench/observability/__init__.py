"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from bullbench.observability.logging import (
    bind_context,
    clear_context,
    setup_logging,
)
from bullbench.observability.metrics import (
    MetricsCollector,
    setup_metrics,
)
from bullbench.observability.tracing import get_tracer, setup_tracing, shutdown_tracing

__all__ = [
    "setup_logging",
    "bind_context",
    "clear_context",
    "setup_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "shutdown_tracing",
]
