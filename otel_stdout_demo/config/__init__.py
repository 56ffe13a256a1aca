"""Configuration for otel-stdout-demo."""

from otel_stdout_demo.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
