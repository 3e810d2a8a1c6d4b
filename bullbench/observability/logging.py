"""
Structured logging setup using structlog.

Logs go to stderr: stdout is reserved for the benchmark report, whose last
line is the JSON record other tools parse.
"""

import logging
import re
import sys
from typing import Any

import structlog
from opentelemetry import trace

from bullbench.config import get_settings
from bullbench.constants import QUIET_LOGGERS

_URL_CREDENTIALS = re.compile(r"(rediss?://)[^@/\s]+@")


def redact_url(text: str) -> str:
    """
    Mask the credentials of every Redis URL in a string.

    Args:
        text: Any text that may contain a URL such as redis://:secret@host:6379/0.

    Returns:
        The text with each URL's user info replaced by ***.
    """
    return _URL_CREDENTIALS.sub(r"\1***@", text)


def redact_credentials(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask Redis credentials in every string value of a log record."""
    for key, value in event_dict.items():
        if isinstance(value, str) and "://" in value:
            event_dict[key] = redact_url(value)
    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add OpenTelemetry trace context to log records.

    Scenario logs emitted inside a run_scenario span can then be matched
    with the exported trace.

    Args:
        logger: The logger instance.
        method_name: The method name being called.
        event_dict: The event dictionary.

    Returns:
        The event dictionary with trace context added.
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def build_renderer(log_format: str) -> Any:
    """JSON lines for log shipping, colored console output on a terminal."""
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging() -> None:
    """
    Configure structured logging for the benchmark run.

    structlog and standard library records share one processor chain and
    one stderr handler, so BullMQ and redis warnings carry the bound suite
    and runtime too.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_trace_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
        redact_credentials,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            build_renderer(settings.log_format),
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables to all subsequent log messages.

    Args:
        **kwargs: Key-value pairs to add to log context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
