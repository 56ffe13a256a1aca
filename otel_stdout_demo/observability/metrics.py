"""
OpenTelemetry metrics for the stdout demo.

Instruments record into a MeterProvider whose PeriodicExportingMetricReader
hands a snapshot to the console exporter on every tick (SDK default: 60s)
and once more on shutdown.

Aggregation follows the SDK defaults:
- Counters sum per unique attribute set, cumulative temporality
- Histograms keep count/sum/min/max and explicit bucket counts per attribute
  set (boundaries 0, 5, 10, 25, 50, 75, 100, 250, 500, 750, 1000, 2500, 5000,
  7500, 10000), cumulative temporality
"""

from __future__ import annotations

from typing import IO
from weakref import WeakKeyDictionary

import structlog
from opentelemetry import metrics
from opentelemetry.metrics import Counter, Histogram, Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricExporter,
    MetricExportResult,
    MetricReader,
    MetricsData,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource

from otel_stdout_demo.observability.console import flush_sink, resolve_sink
from otel_stdout_demo.observability.errors import ProviderShutdownError

logger = structlog.get_logger(__name__)


class ConsoleSinkMetricExporter(ConsoleMetricExporter):
    """
    ConsoleMetricExporter that remembers why its last export failed.

    The periodic reader logs and discards exporter exceptions, including the
    one raised by the final export during shutdown. Recording the failure here
    lets shutdown_meter_provider() report it.

    Attributes:
        export_error: Exception from the most recent export, or None if it
            succeeded.
    """

    def __init__(self, out: IO[str]) -> None:
        super().__init__(out=out)
        self.export_error: Exception | None = None

    def export(
        self,
        metrics_data: MetricsData,
        timeout_millis: float = 10_000,
        **kwargs,
    ) -> MetricExportResult:
        try:
            result = super().export(metrics_data, timeout_millis=timeout_millis, **kwargs)
        except (OSError, ValueError) as exc:
            self.export_error = exc
            return MetricExportResult.FAILURE
        self.export_error = None
        return result


# Console exporters created by init_meter_provider, keyed by provider
_console_exporters: WeakKeyDictionary[MeterProvider, ConsoleSinkMetricExporter] = (
    WeakKeyDictionary()
)


def init_meter_provider(
    resource: Resource,
    *,
    exporter: MetricExporter | None = None,
    reader: MetricReader | None = None,
    out: IO[str] | None = None,
    export_interval_millis: float | None = None,
    set_global: bool = True,
) -> MeterProvider:
    """
    Initialize the OpenTelemetry MeterProvider.

    Args:
        resource: Shared resource attached to every metric.
        exporter: Exporter for the periodic reader (default: console).
        reader: Custom reader, e.g. InMemoryMetricReader for tests. Takes
            precedence over ``exporter``.
        out: Stream the console exporter writes to (default: sys.stdout).
        export_interval_millis: Periodic export interval; None keeps the SDK
            default.
        set_global: Register the provider as the process-wide default.

    Returns:
        The configured MeterProvider.
    """
    console_exporter = None
    if reader is None:
        if exporter is None:
            exporter = console_exporter = ConsoleSinkMetricExporter(resolve_sink(out))
        reader = PeriodicExportingMetricReader(
            exporter,
            export_interval_millis=export_interval_millis,
        )

    provider = MeterProvider(
        resource=resource,
        metric_readers=[reader],
        shutdown_on_exit=False,
    )
    if console_exporter is not None:
        _console_exporters[provider] = console_exporter

    if set_global:
        metrics.set_meter_provider(provider)

    logger.debug(
        "Meter provider initialized",
        reader=type(reader).__name__,
        set_global=set_global,
    )
    return provider


def shutdown_meter_provider(
    provider: MeterProvider, out: IO[str] | None = None
) -> None:
    """
    Shut the provider down after a final collection.

    MeterProvider.shutdown() stops the reader's timer thread and runs one last
    collect/export before returning, so observations recorded since the last
    tick reach the sink without waiting for the next interval.

    Raises:
        ProviderShutdownError: If the sink is unavailable, the final export
            fails or a reader fails to shut down.
    """
    flush_sink("meter", out)
    console_exporter = _console_exporters.pop(provider, None)
    try:
        provider.shutdown()
    # MeterProvider.shutdown raises a bare Exception for reader failures
    except Exception as exc:
        raise ProviderShutdownError("meter", str(exc)) from exc

    if console_exporter is not None and console_exporter.export_error is not None:
        raise ProviderShutdownError(
            "meter", f"final export failed: {console_exporter.export_error}"
        ) from console_exporter.export_error
    logger.debug("Meter provider shut down")


def get_meter(provider: MeterProvider, name: str, version: str | None = None) -> Meter:
    """Get a named meter and log its creation."""
    meter = provider.get_meter(name, version)
    logger.debug("Meter created", meter_name=name)
    return meter


def create_counter(
    meter: Meter, name: str, unit: str = "", description: str = ""
) -> Counter:
    """Create a monotonic counter."""
    counter = meter.create_counter(name, unit=unit, description=description)
    logger.debug("Instrument created", instrument_name=name, kind="counter")
    return counter


def create_histogram(
    meter: Meter, name: str, unit: str = "", description: str = ""
) -> Histogram:
    """Create a histogram with the SDK's default bucket boundaries."""
    histogram = meter.create_histogram(name, unit=unit, description=description)
    logger.debug("Instrument created", instrument_name=name, kind="histogram")
    return histogram
