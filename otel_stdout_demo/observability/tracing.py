"""
OpenTelemetry tracing for the stdout demo.

Provides:
- init_tracer_provider(): TracerProvider that prints each span when it ends
- shutdown_tracer_provider(): Flush pending spans and release the exporter
- get_tracer(): Tracer for a named, versioned instrumentation scope
- traced(): Context manager for creating spans
- add_trace_context(): structlog processor that injects trace_id/span_id into logs

Spans go through a SimpleSpanProcessor, so each span is exported on the
thread that closes it, one export call per span. There is no batching.

Usage:
    from otel_stdout_demo.observability.resource import get_resource
    from otel_stdout_demo.observability.tracing import get_tracer, init_tracer_provider

    provider = init_tracer_provider(get_resource())
    tracer = get_tracer(provider, "my_scope", "v1")

    with tracer.start_as_current_span("process_batch") as span:
        span.set_attribute("batch_size", len(batch))
        ...
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import IO, Any

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)
from opentelemetry.trace import StatusCode, Tracer
from opentelemetry.trace.propagation import get_current_span

from otel_stdout_demo.observability.console import flush_sink, resolve_sink
from otel_stdout_demo.observability.errors import ProviderShutdownError

logger = structlog.get_logger(__name__)


def init_tracer_provider(
    resource: Resource,
    *,
    exporter: SpanExporter | None = None,
    out: IO[str] | None = None,
    set_global: bool = True,
) -> TracerProvider:
    """
    Initialize the OpenTelemetry TracerProvider.

    Uses ConsoleSpanExporter by default. Pass a custom exporter for testing
    (e.g., InMemorySpanExporter).

    Args:
        resource: Shared resource attached to every span.
        exporter: Optional custom exporter (overrides the console exporter).
        out: Stream the console exporter writes to (default: sys.stdout).
        set_global: Register the provider as the process-wide default.

    Returns:
        The configured TracerProvider.
    """
    if exporter is None:
        exporter = ConsoleSpanExporter(out=resolve_sink(out))

    provider = TracerProvider(resource=resource, shutdown_on_exit=False)
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    if set_global:
        trace.set_tracer_provider(provider)

    logger.debug(
        "Tracer provider initialized",
        exporter=type(exporter).__name__,
        set_global=set_global,
    )
    return provider


def shutdown_tracer_provider(
    provider: TracerProvider, out: IO[str] | None = None
) -> None:
    """
    Flush pending spans, then shut the provider down.

    Args:
        provider: Provider returned by init_tracer_provider().
        out: Sink the provider's console exporter writes to.

    Raises:
        ProviderShutdownError: If spans could not be flushed or the sink is
            unavailable.
    """
    if not provider.force_flush():
        raise ProviderShutdownError("tracer", "timed out flushing spans")
    flush_sink("tracer", out)
    provider.shutdown()
    logger.debug("Tracer provider shut down")


def get_tracer(
    provider: TracerProvider,
    name: str,
    version: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Tracer:
    """
    Get a tracer for an instrumentation scope.

    Args:
        provider: Provider the tracer exports through.
        name: Instrumentation scope name.
        version: Instrumentation scope version.
        attributes: Scope-level attributes, exported with every span.

    Returns:
        Tracer instance.
    """
    return provider.get_tracer(name, version, attributes=attributes)


# ── Convenience span helper ──────────────────────────────────────────


@contextmanager
def traced(
    tracer: Tracer,
    name: str,
    attributes: dict[str, Any] | None = None,
):
    """
    Context manager that creates a span and records exceptions.

    Usage:
        tracer = get_tracer(provider, "demo")
        with traced(tracer, "emit", {"signal": "span"}):
            ...

    Args:
        tracer: Tracer instance.
        name: Span name.
        attributes: Optional span attributes.
    """
    with tracer.start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        if attributes:
            for k, v in attributes.items():
                span.set_attribute(k, v)
        try:
            yield span
        except Exception as exc:
            span.set_status(StatusCode.ERROR, str(exc))
            span.record_exception(exc)
            raise


# ── Structlog processor for trace correlation ────────────────────────


def add_trace_context(
    logger_: Any, method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Structlog processor that injects trace_id and span_id into log entries.

    Used by the stderr diagnostics chain. Records that go through the
    OpenTelemetry bridge get their trace context from the SDK instead.
    """
    span = get_current_span()
    ctx = span.get_span_context()

    if ctx.is_valid:
        event_dict["trace_id"] = f"{ctx.trace_id:032x}"
        event_dict["span_id"] = f"{ctx.span_id:016x}"

    return event_dict
