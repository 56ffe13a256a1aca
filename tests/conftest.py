"""Pytest fixtures for otel-stdout-demo tests."""

from typing import Generator

import pytest
import structlog
from opentelemetry.sdk._logs.export import InMemoryLogRecordExporter
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from otel_stdout_demo.config.settings import Settings, get_settings
from otel_stdout_demo.observability.logging import remove_log_bridge
from otel_stdout_demo.observability.resource import get_resource
from otel_stdout_demo.telemetry import Telemetry, init_telemetry


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop any structlog bridge, bound context and cached settings after each test."""
    get_settings.cache_clear()
    yield
    remove_log_bridge()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing (environment and .env ignored)."""
    return Settings(
        _env_file=None,
        service_name="otel-stdout-demo-test",
        log_level="INFO",
    )


@pytest.fixture
def resource(test_settings: Settings) -> Resource:
    return get_resource(test_settings.service_name)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def metric_reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def log_exporter() -> InMemoryLogRecordExporter:
    return InMemoryLogRecordExporter()


@pytest.fixture
def telemetry(
    test_settings: Settings,
    span_exporter: InMemorySpanExporter,
    metric_reader: InMemoryMetricReader,
    log_exporter: InMemoryLogRecordExporter,
) -> Generator[Telemetry, None, None]:
    """Telemetry wired to in-memory exporters, not registered globally."""
    telemetry = init_telemetry(
        test_settings,
        set_global=False,
        span_exporter=span_exporter,
        metric_reader=metric_reader,
        log_exporter=log_exporter,
    )
    yield telemetry
    telemetry.shutdown()


@pytest.fixture
def metric_points(metric_reader: InMemoryMetricReader):
    """Return a collector for data points of one metric, keyed by sorted attribute items."""

    def collect(name: str) -> dict:
        data = metric_reader.get_metrics_data()
        for resource_metrics in data.resource_metrics:
            for scope_metrics in resource_metrics.scope_metrics:
                for metric in scope_metrics.metrics:
                    if metric.name == name:
                        return {
                            tuple(sorted(point.attributes.items())): point
                            for point in metric.data.data_points
                        }
        raise AssertionError(f"metric {name!r} was not exported")

    return collect
