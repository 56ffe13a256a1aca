"""Example emitters for each signal type."""

from otel_stdout_demo.demo.emitters import emit_log, emit_metrics, emit_span

__all__ = ["emit_log", "emit_metrics", "emit_span"]
