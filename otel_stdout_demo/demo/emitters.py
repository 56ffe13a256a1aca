"""
Example signal emitters.

Each function produces one example of a signal type:

- emit_log(): one ERROR log record, outside any span
- emit_span(): one span with an attribute, an event and a correlated log record
- emit_metrics(): five counter increments and five histogram recordings over
  three attribute sets

Names, attributes and values below are fixtures the console output is checked
against, not business data.
"""

from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace import TracerProvider

from otel_stdout_demo.observability.logging import get_logger
from otel_stdout_demo.observability.metrics import (
    create_counter,
    create_histogram,
    get_meter,
)
from otel_stdout_demo.observability.tracing import get_tracer, traced

# ── Log fixtures ─────────────────────────────────────────────

LOG_EVENT_NAME = "function-emit-log-my-name"
LOG_TARGET = "function-emit-log-my-target"
LOG_ATTRIBUTES = {
    "name": LOG_EVENT_NAME,
    "event_id": 20,
    "user_name": "function-emit-log-my-target-user-name",
    "user_email": "function-emit-log-my-user-email",
}

# ── Span fixtures ────────────────────────────────────────────

SCOPE_NAME = "stdout-example"
SCOPE_VERSION = "v1"
SCOPE_ATTRIBUTES = {"scope_key": "scope_value"}

SPAN_NAME = "example-span"
SPAN_ATTRIBUTE = ("my-attribute", "my-value")
SPAN_EVENT_NAME = "example-event-name"
SPAN_EVENT_ATTRIBUTES = {"event_attribute1": "event_value1"}

SPAN_LOG_EVENT_NAME = "function-emit-span-my-name"
SPAN_LOG_TARGET = "function-emit-span-my-target"
SPAN_LOG_ATTRIBUTES = {
    "name": SPAN_LOG_EVENT_NAME,
    "event_id": 20,
    "user_name": "function-emit-span-my-target-user-name",
    "user_email": "function-emit-span-my-user-email",
}

# ── Metric fixtures ──────────────────────────────────────────

METER_NAME = "function-emit-metrics-meter"
COUNTER_NAME = "function-emit-metrics-counter"
HISTOGRAM_NAME = "function-emit-metrics-histogram"

APPLE_GREEN = {"name": "apple", "color": "green"}
APPLE_RED = {"name": "apple", "color": "red"}
BANANA_YELLOW = {"name": "banana", "color": "yellow"}

COUNTER_INCREMENTS = (
    (1, APPLE_GREEN),
    (1, APPLE_GREEN),
    (2, APPLE_RED),
    (1, BANANA_YELLOW),
    (11, BANANA_YELLOW),
)
HISTOGRAM_RECORDINGS = (
    (1.0, APPLE_GREEN),
    (1.0, APPLE_GREEN),
    (2.0, APPLE_RED),
    (1.0, BANANA_YELLOW),
    (11.0, BANANA_YELLOW),
)


def emit_log() -> None:
    """Emit one ERROR event through structlog.

    With the OpenTelemetry bridge installed it becomes a log record whose
    scope is LOG_TARGET and whose event name is LOG_EVENT_NAME.
    """
    get_logger(LOG_TARGET).error(LOG_EVENT_NAME, **LOG_ATTRIBUTES)


def emit_span(tracer_provider: TracerProvider) -> None:
    """
    Emit one span under the ``stdout-example`` instrumentation scope.

    While the span is open it gets one attribute, one event and one ERROR
    log record, which is correlated to the span through the active context.
    The span is exported when the block exits.
    """
    tracer = get_tracer(tracer_provider, SCOPE_NAME, SCOPE_VERSION, SCOPE_ATTRIBUTES)

    with traced(tracer, SPAN_NAME) as span:
        span.set_attribute(*SPAN_ATTRIBUTE)
        span.add_event(SPAN_EVENT_NAME, SPAN_EVENT_ATTRIBUTES)
        get_logger(SPAN_LOG_TARGET).error(
            SPAN_LOG_EVENT_NAME, **SPAN_LOG_ATTRIBUTES
        )


def emit_metrics(meter_provider: MeterProvider) -> None:
    """Record the counter and histogram fixtures on a fresh meter."""
    meter = get_meter(meter_provider, METER_NAME)

    counter = create_counter(meter, COUNTER_NAME)
    for value, attributes in COUNTER_INCREMENTS:
        counter.add(value, attributes)

    histogram = create_histogram(meter, HISTOGRAM_NAME)
    for value, attributes in HISTOGRAM_RECORDINGS:
        histogram.record(value, attributes)
