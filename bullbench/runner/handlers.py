"""
Workload handlers registry and implementations.

Handlers run inside the BullMQ worker once per job. They must stay
deterministic so processing scenarios measure the queue, not the workload.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from bullbench.constants import FIBONACCI_N, HANDLER_FIBONACCI, HANDLER_NOOP
from bullbench.types.job import JobContext

logger = logging.getLogger(__name__)

# Type alias for workload handler functions
WorkloadHandler = Callable[[JobContext], Awaitable[dict[str, Any]]]

# Handler registry
_handlers: dict[str, WorkloadHandler] = {}


def register_handler(name: str) -> Callable[[WorkloadHandler], WorkloadHandler]:
    """
    Decorator to register a workload handler.

    Args:
        name: The name scenarios use to look the handler up.

    Returns:
        Decorator function.

    Example:
        @register_handler("sleep")
        async def handle_sleep(context: JobContext) -> dict[str, Any]:
            ...
    """
    def decorator(handler: WorkloadHandler) -> WorkloadHandler:
        _handlers[name] = handler
        logger.debug(f"Registered workload handler: {name}")
        return handler
    return decorator


def get_handler(name: str) -> WorkloadHandler:
    """
    Get the handler registered under a name.

    Args:
        name: The handler name.

    Returns:
        The handler function.

    Raises:
        KeyError: If no handler is registered under that name.
    """
    try:
        return _handlers[name]
    except KeyError:
        known = ", ".join(list_handlers())
        raise KeyError(f"No workload handler registered: {name} (known: {known})") from None


def list_handlers() -> list[str]:
    """List all registered handler names."""
    return list(_handlers.keys())


def fibonacci(n: int) -> int:
    """Naive recursive Fibonacci, used as a fixed CPU cost."""
    return n if n <= 1 else fibonacci(n - 1) + fibonacci(n - 2)


# ============================================================================
# Built-in workload handlers
# ============================================================================


@register_handler(HANDLER_NOOP)
async def handle_noop(context: JobContext) -> dict[str, Any]:
    """Minimal work: report the job index back."""
    return {"processed": context.index}


@register_handler(HANDLER_FIBONACCI)
async def handle_fibonacci(context: JobContext) -> dict[str, Any]:
    """
    CPU-bound work before completing.

    Computes fib(20) recursively on the event loop thread, which isolates
    per-job queue overhead from pure CPU cost when compared with `noop`.
    """
    fibonacci(FIBONACCI_N)
    return {"processed": context.index}
