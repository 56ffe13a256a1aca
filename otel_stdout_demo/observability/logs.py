"""
OpenTelemetry logs for the stdout demo.

Provides:
- init_logger_provider(): LoggerProvider that prints each record as it is emitted
- shutdown_logger_provider(): Flush pending records and release the exporter
- StructlogBridge: structlog processor that turns events into log records

The bridge is the final processor of the structlog chain:

    structlog event dict          OpenTelemetry log record
    --------------------          ------------------------
    event                    ->   event_name
    logger (logger name)     ->   instrumentation scope name (target)
    level                    ->   severity_number / severity_text
    exc_info                 ->   exception
    remaining keys           ->   attributes

Records are emitted in the current OpenTelemetry context, so a log written
inside an open span carries that span's trace_id and span_id, and one written
outside any span carries neither.
"""

from __future__ import annotations

import sys
from time import time_ns
from typing import IO, Any

import structlog
from opentelemetry._logs import SeverityNumber, set_logger_provider
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import (
    ConsoleLogRecordExporter,
    LogRecordExporter,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource

from otel_stdout_demo.observability.console import flush_sink, resolve_sink
from otel_stdout_demo.observability.errors import ProviderShutdownError
from otel_stdout_demo.observability.logging import (
    get_log_bridge,
    remove_log_bridge,
    setup_logging,
)

logger = structlog.get_logger(__name__)

# structlog level name -> (severity number, severity text)
SEVERITY_BY_LEVEL: dict[str, tuple[SeverityNumber, str]] = {
    "debug": (SeverityNumber.DEBUG, "DEBUG"),
    "info": (SeverityNumber.INFO, "INFO"),
    "warning": (SeverityNumber.WARN, "WARN"),
    "error": (SeverityNumber.ERROR, "ERROR"),
    "critical": (SeverityNumber.FATAL, "FATAL"),
}

# Keys consumed by the bridge rather than copied into attributes
_RESERVED_KEYS = ("event", "logger", "level", "timestamp", "exc_info")


class StructlogBridge:
    """
    structlog processor that forwards events to an OpenTelemetry LoggerProvider.

    Usage:
        provider = LoggerProvider(resource=resource)
        structlog.configure(processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            StructlogBridge(provider),
        ])

    The event is dropped after it has been emitted, so it must be the last
    processor in the chain.
    """

    def __init__(self, logger_provider: LoggerProvider) -> None:
        self.logger_provider = logger_provider

    def __call__(
        self, logger_: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        level = event_dict.get("level", method_name)
        severity_number, severity_text = SEVERITY_BY_LEVEL.get(
            level, (SeverityNumber.UNSPECIFIED, str(level).upper())
        )

        event = event_dict.get("event")
        target = event_dict.get("logger") or ""
        attributes = {
            key: value
            for key, value in event_dict.items()
            if key not in _RESERVED_KEYS
        }

        self.logger_provider.get_logger(target).emit(
            timestamp=time_ns(),
            severity_number=severity_number,
            severity_text=severity_text,
            event_name=str(event) if event is not None else None,
            attributes=attributes or None,
            exception=_exception_from(event_dict.get("exc_info")),
        )
        raise structlog.DropEvent


def _exception_from(exc_info: Any) -> BaseException | None:
    """Resolve structlog's exc_info value to an exception instance."""
    if not exc_info:
        return None
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1]
    return sys.exc_info()[1]


def init_logger_provider(
    resource: Resource,
    *,
    exporter: LogRecordExporter | None = None,
    out: IO[str] | None = None,
    set_global: bool = True,
    install_bridge: bool = True,
    log_level: str = "INFO",
) -> LoggerProvider:
    """
    Initialize the OpenTelemetry LoggerProvider and bridge structlog into it.

    Uses ConsoleLogRecordExporter by default. Pass a custom exporter for
    testing (e.g., InMemoryLogRecordExporter).

    Args:
        resource: Shared resource attached to every log record.
        exporter: Optional custom exporter (overrides the console exporter).
        out: Stream the console exporter writes to (default: sys.stdout).
        set_global: Register the provider as the process-wide default.
        install_bridge: Reconfigure structlog so its events become log records.
        log_level: Minimum level forwarded by the bridge.

    Returns:
        The configured LoggerProvider.
    """
    if exporter is None:
        exporter = ConsoleLogRecordExporter(out=resolve_sink(out))

    provider = LoggerProvider(resource=resource, shutdown_on_exit=False)
    provider.add_log_record_processor(SimpleLogRecordProcessor(exporter))

    if set_global:
        set_logger_provider(provider)

    if install_bridge:
        setup_logging(log_level, bridge=StructlogBridge(provider))

    logger.debug(
        "Logger provider initialized",
        exporter=type(exporter).__name__,
        bridge_installed=install_bridge,
    )
    return provider


def shutdown_logger_provider(
    provider: LoggerProvider, out: IO[str] | None = None
) -> None:
    """
    Flush pending log records, then shut the provider down.

    If the structlog bridge points at this provider it is removed afterwards,
    so later events are rendered to stderr instead of being dropped.

    Raises:
        ProviderShutdownError: If records could not be flushed or the sink is
            unavailable.
    """
    logger.debug("Shutting down logger provider")
    if not provider.force_flush():
        raise ProviderShutdownError("logger", "timed out flushing log records")
    flush_sink("logger", out)
    provider.shutdown()

    bridge = get_log_bridge()
    if isinstance(bridge, StructlogBridge) and bridge.logger_provider is provider:
        remove_log_bridge()
