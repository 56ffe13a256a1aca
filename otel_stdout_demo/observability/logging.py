"""
Structured logging configuration using structlog.

Both processor chains share the same leading processors and differ in where
an event ends up:

- diagnostics (default): readable console lines on stderr, with trace_id and
  span_id added while a span is active
- bridged: the last processor hands the event to an OpenTelemetry
  LoggerProvider, whose exporter renders it, and drops it from structlog

init_logger_provider() installs the bridged chain; shutting that provider
down puts the diagnostics chain back.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from otel_stdout_demo.observability.tracing import add_trace_context

# Level and bridge of the active configuration
_log_level = "INFO"
_bridge: Processor | None = None


def setup_logging(log_level: str = "INFO", bridge: Processor | None = None) -> None:
    """
    Configure structured logging for the application.

    Usage:
        setup_logging("DEBUG")
        logger = structlog.get_logger(__name__)
        logger.info("Provider ready", signal="traces")

    Args:
        log_level: Minimum stdlib level name for events to be processed.
        bridge: Final processor that forwards events to OpenTelemetry. When
            None, events are rendered to stderr.
    """
    global _log_level, _bridge

    shared_processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if bridge is not None:
        processors = shared_processors + [bridge]
    else:
        processors = shared_processors + [
            add_trace_context,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    # Loggers are not cached: the chain is swapped when the bridge is
    # installed and removed.
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Diagnostics go to stderr; stdout belongs to the exporters
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.INFO))

    logging.getLogger("opentelemetry").setLevel(logging.WARNING)

    _log_level = log_level
    _bridge = bridge


def get_log_bridge() -> Processor | None:
    """Return the installed OpenTelemetry bridge processor, if any."""
    return _bridge


def remove_log_bridge() -> None:
    """Go back to stderr diagnostics at the current level."""
    if _bridge is not None:
        setup_logging(_log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name. Bridged events use it as the instrumentation
            scope (target) of the log record.

    Returns:
        Bound logger instance
    """
    return structlog.get_logger(name)
