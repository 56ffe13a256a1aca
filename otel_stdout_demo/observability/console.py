"""Console sink shared by the span, metric and log exporters."""

import sys
from typing import IO

from otel_stdout_demo.observability.errors import ProviderShutdownError


def resolve_sink(out: IO[str] | None = None) -> IO[str]:
    """Return ``out``, or the current ``sys.stdout`` when none is given.

    Resolved at call time so a replaced stdout (e.g. click's CliRunner) is
    picked up by exporters created afterwards.
    """
    return out if out is not None else sys.stdout


def flush_sink(signal: str, out: IO[str] | None = None) -> None:
    """
    Flush the console sink before a provider shuts down.

    Args:
        signal: Provider name used in the error message.
        out: The sink the provider's exporter writes to.

    Raises:
        ProviderShutdownError: If the sink is closed or cannot be flushed.
    """
    sink = resolve_sink(out)
    # A closed StringIO may flush without raising
    if getattr(sink, "closed", False):
        raise ProviderShutdownError(signal, "console sink closed")
    try:
        sink.flush()
    except (OSError, ValueError) as exc:
        raise ProviderShutdownError(signal, f"console sink unavailable: {exc}") from exc
