"""
Tests for demo orchestration.

Verifies:
- DemoRun moves INITIALIZED -> EMITTED -> SHUT_DOWN and rejects misuse
- run_demo writes log, span and metrics to the sink in that order
- A provider failing to shut down stops the providers after it
"""

import io

import pytest
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from otel_stdout_demo.observability.errors import ProviderShutdownError
from otel_stdout_demo.observability.logging import get_log_bridge
from otel_stdout_demo.runner import DemoRun, DemoState, run_demo
from otel_stdout_demo.telemetry import init_telemetry


class TestDemoRun:
    def test_state_transitions(self, telemetry):
        run = DemoRun(telemetry)
        assert run.state is DemoState.INITIALIZED

        run.emit()
        assert run.state is DemoState.EMITTED

        run.shutdown()
        assert run.state is DemoState.SHUT_DOWN
        assert telemetry.is_shut_down

    def test_emits_every_signal(self, telemetry, span_exporter, log_exporter, metric_points):
        DemoRun(telemetry).emit()

        assert len(span_exporter.get_finished_spans()) == 1
        assert len(log_exporter.get_finished_logs()) == 2
        assert len(metric_points("function-emit-metrics-counter")) == 3

    def test_shutdown_before_emit_rejected(self, telemetry):
        with pytest.raises(RuntimeError, match="expected emitted"):
            DemoRun(telemetry).shutdown()

    def test_emit_twice_rejected(self, telemetry):
        run = DemoRun(telemetry)
        run.emit()

        with pytest.raises(RuntimeError, match="expected initialized"):
            run.emit()

    def test_failed_shutdown_stays_emitted(self, telemetry, monkeypatch):
        def fail(*args, **kwargs):
            raise ProviderShutdownError("tracer", "boom")

        monkeypatch.setattr("otel_stdout_demo.telemetry.shutdown_tracer_provider", fail)
        run = DemoRun(telemetry)
        run.emit()

        with pytest.raises(ProviderShutdownError):
            run.shutdown()

        assert run.state is DemoState.EMITTED


class TestTelemetryShutdown:
    def test_second_shutdown_is_noop(self, test_settings):
        telemetry = init_telemetry(
            test_settings, out=io.StringIO(), set_global=False, metric_reader=InMemoryMetricReader()
        )

        telemetry.shutdown()
        telemetry.shutdown()

        assert telemetry.is_shut_down

    def test_bridge_removed_after_shutdown(self, test_settings):
        telemetry = init_telemetry(
            test_settings, out=io.StringIO(), set_global=False, metric_reader=InMemoryMetricReader()
        )
        assert get_log_bridge() is not None

        telemetry.shutdown()

        assert get_log_bridge() is None

    def test_first_failure_short_circuits(self, test_settings, monkeypatch):
        """When the tracer provider fails, meter and logger are left running."""
        calls = []
        monkeypatch.setattr(
            "otel_stdout_demo.telemetry.shutdown_meter_provider",
            lambda *args: calls.append("meter"),
        )
        monkeypatch.setattr(
            "otel_stdout_demo.telemetry.shutdown_logger_provider",
            lambda *args: calls.append("logger"),
        )
        out = io.StringIO()
        telemetry = init_telemetry(
            test_settings, out=out, set_global=False, metric_reader=InMemoryMetricReader()
        )
        out.close()

        with pytest.raises(ProviderShutdownError) as exc_info:
            telemetry.shutdown()

        assert exc_info.value.signal == "tracer"
        assert calls == []
        assert not telemetry.is_shut_down

        telemetry.meter_provider.shutdown()
        telemetry.logger_provider.shutdown()


class TestRunDemo:
    def test_console_output_order(self, test_settings):
        out = io.StringIO()

        run = run_demo(test_settings, out=out, set_global=False)

        assert run.state is DemoState.SHUT_DOWN
        text = out.getvalue()
        log_pos = text.index("function-emit-log-my-name")
        span_log_pos = text.index("function-emit-span-my-name")
        span_pos = text.index('"name": "example-span"')
        metrics_pos = text.index("function-emit-metrics-counter")
        assert log_pos < span_log_pos < span_pos < metrics_pos

    def test_console_output_contents(self, test_settings):
        out = io.StringIO()

        run_demo(test_settings, out=out, set_global=False)

        text = out.getvalue()
        assert "otel-stdout-demo-test" in text
        assert "example-event-name" in text
        assert "function-emit-metrics-histogram" in text
        assert text.count('"name": "example-span"') == 1

    def test_closed_sink_fails(self, test_settings, monkeypatch):
        out = io.StringIO()
        emit = DemoRun.emit

        def emit_then_close(self):
            emit(self)
            out.close()

        monkeypatch.setattr(DemoRun, "emit", emit_then_close)

        with pytest.raises(ProviderShutdownError, match="tracer provider shutdown failed"):
            run_demo(test_settings, out=out, set_global=False)
