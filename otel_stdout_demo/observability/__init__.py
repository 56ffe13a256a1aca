"""Observability layer - resource, tracing, metrics, logs and structured logging."""

from otel_stdout_demo.observability.errors import ProviderShutdownError
from otel_stdout_demo.observability.logging import get_logger, setup_logging
from otel_stdout_demo.observability.logs import (
    StructlogBridge,
    init_logger_provider,
    shutdown_logger_provider,
)
from otel_stdout_demo.observability.metrics import (
    init_meter_provider,
    shutdown_meter_provider,
)
from otel_stdout_demo.observability.resource import get_resource
from otel_stdout_demo.observability.tracing import (
    get_tracer,
    init_tracer_provider,
    shutdown_tracer_provider,
)

__all__ = [
    "ProviderShutdownError",
    "StructlogBridge",
    "get_logger",
    "get_resource",
    "get_tracer",
    "init_logger_provider",
    "init_meter_provider",
    "init_tracer_provider",
    "setup_logging",
    "shutdown_logger_provider",
    "shutdown_meter_provider",
    "shutdown_tracer_provider",
]
