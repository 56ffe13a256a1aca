"""
Process-wide OpenTelemetry resource.

The resource describes the emitting service and is attached to every span,
metric and log record. It is built once per service name and the same object
is handed to the tracer, meter and logger providers.
"""

from functools import lru_cache

from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from otel_stdout_demo.config.settings import get_settings


def get_resource(service_name: str | None = None) -> Resource:
    """
    Get the shared resource.

    Args:
        service_name: Overrides ``Settings.service_name``.

    Returns:
        Resource with ``service.name`` plus the SDK's ``telemetry.sdk.*``
        attributes.
    """
    if service_name is None:
        service_name = get_settings().service_name
    return _build_resource(service_name)


@lru_cache
def _build_resource(service_name: str) -> Resource:
    return Resource.create({SERVICE_NAME: service_name})
