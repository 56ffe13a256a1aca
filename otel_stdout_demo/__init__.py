"""OpenTelemetry stdout demo - one span, one set of metrics and log records printed to the console."""

__version__ = "0.1.0"
