"""
Demo orchestration: initialize providers, emit one of each signal, shut down.

State machine: INITIALIZED → EMITTED → SHUT_DOWN.

- INITIALIZED: tracer, meter and logger providers are up (in that order)
- EMITTED: log, span and metrics emitters have run (in that order)
- SHUT_DOWN: tracer, meter and logger providers are shut down (in that order)

Everything runs sequentially on the calling thread. The SDK shutdown calls
are synchronous, so no event loop is involved.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import IO

import structlog

from otel_stdout_demo.config.settings import Settings
from otel_stdout_demo.demo.emitters import emit_log, emit_metrics, emit_span
from otel_stdout_demo.telemetry import Telemetry, init_telemetry

logger = structlog.get_logger(__name__)


class DemoState(enum.Enum):
    """Lifecycle states of a demo run."""

    INITIALIZED = "initialized"
    EMITTED = "emitted"
    SHUT_DOWN = "shut_down"


@dataclass
class DemoRun:
    """One pass of the demo over an initialized Telemetry bundle."""

    telemetry: Telemetry
    state: DemoState = DemoState.INITIALIZED

    def emit(self) -> None:
        """Run the emitters: log, span, metrics."""
        self._require(DemoState.INITIALIZED)

        emit_log()
        emit_span(self.telemetry.tracer_provider)
        emit_metrics(self.telemetry.meter_provider)

        self.state = DemoState.EMITTED

    def shutdown(self) -> None:
        """
        Shut the providers down.

        Raises:
            ProviderShutdownError: From the first provider that fails; the
                run stays in EMITTED.
        """
        self._require(DemoState.EMITTED)
        self.telemetry.shutdown()
        self.state = DemoState.SHUT_DOWN

    def _require(self, expected: DemoState) -> None:
        if self.state is not expected:
            raise RuntimeError(
                f"Demo run is {self.state.value}, expected {expected.value}"
            )


def run_demo(
    settings: Settings | None = None,
    *,
    out: IO[str] | None = None,
    set_global: bool = True,
) -> DemoRun:
    """
    Run the whole demo once.

    Args:
        settings: Defaults to get_settings().
        out: Console sink for all three exporters (default: sys.stdout).
        set_global: Register the providers as process-wide defaults.

    Returns:
        The finished run, in state SHUT_DOWN.

    Raises:
        ProviderShutdownError: If any provider fails to shut down.
    """
    run = DemoRun(init_telemetry(settings, out=out, set_global=set_global))
    run.emit()
    run.shutdown()

    logger.info("Demo complete", state=run.state.value)
    return run
