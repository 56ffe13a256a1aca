"""
Telemetry bundle: the tracer, meter and logger providers plus their sink.

Emitters take provider handles from a Telemetry object rather than looking
them up through the OpenTelemetry globals. Providers are still registered
globally by default so third-party instrumentation finds them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO

import structlog
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import LogRecordExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SpanExporter

from otel_stdout_demo.config.settings import Settings, get_settings
from otel_stdout_demo.observability.logs import (
    init_logger_provider,
    shutdown_logger_provider,
)
from otel_stdout_demo.observability.metrics import (
    init_meter_provider,
    shutdown_meter_provider,
)
from otel_stdout_demo.observability.resource import get_resource
from otel_stdout_demo.observability.tracing import (
    init_tracer_provider,
    shutdown_tracer_provider,
)

logger = structlog.get_logger(__name__)


@dataclass
class Telemetry:
    """
    The three signal providers of one demo run.

    Attributes:
        tracer_provider: Exports spans as they close.
        meter_provider: Exports metric snapshots periodically and on shutdown.
        logger_provider: Exports log records as they are emitted.
        out: Console sink shared by the exporters (None = sys.stdout).
    """

    tracer_provider: TracerProvider
    meter_provider: MeterProvider
    logger_provider: LoggerProvider
    out: IO[str] | None = None
    _shut_down: bool = field(default=False, init=False, repr=False)

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    def shutdown(self) -> None:
        """
        Shut down tracer, meter and logger providers, in that order.

        The first failure propagates and the providers after it are left
        running. Once shutdown has succeeded, further calls do nothing.

        Raises:
            ProviderShutdownError: If a provider cannot flush or shut down.
        """
        if self._shut_down:
            return

        shutdown_tracer_provider(self.tracer_provider, self.out)
        shutdown_meter_provider(self.meter_provider, self.out)
        shutdown_logger_provider(self.logger_provider, self.out)

        self._shut_down = True
        logger.debug("Telemetry shut down")


def init_telemetry(
    settings: Settings | None = None,
    *,
    out: IO[str] | None = None,
    set_global: bool = True,
    span_exporter: SpanExporter | None = None,
    metric_reader: MetricReader | None = None,
    log_exporter: LogRecordExporter | None = None,
) -> Telemetry:
    """
    Initialize tracer, meter and logger providers, in that order.

    All three share one Resource. Custom exporters/readers replace the
    console ones (used by tests).

    Args:
        settings: Defaults to get_settings().
        out: Console sink (default: sys.stdout).
        set_global: Register each provider as the process-wide default.
        span_exporter: Custom span exporter.
        metric_reader: Custom metric reader.
        log_exporter: Custom log record exporter.

    Returns:
        Telemetry bundling the initialized providers.
    """
    settings = settings or get_settings()
    resource = get_resource(settings.service_name)

    tracer_provider = init_tracer_provider(
        resource, exporter=span_exporter, out=out, set_global=set_global
    )
    meter_provider = init_meter_provider(
        resource,
        reader=metric_reader,
        out=out,
        export_interval_millis=settings.metric_export_interval_millis,
        set_global=set_global,
    )
    logger_provider = init_logger_provider(
        resource,
        exporter=log_exporter,
        out=out,
        set_global=set_global,
        log_level=settings.log_level,
    )

    return Telemetry(
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
        logger_provider=logger_provider,
        out=out,
    )
