"""Errors raised while tearing down telemetry providers."""


class ProviderShutdownError(Exception):
    """Raised when a provider cannot flush its exporter or shut down.

    Attributes:
        signal: Which provider failed ("tracer", "meter" or "logger").
    """

    def __init__(self, signal: str, message: str):
        super().__init__(f"{signal} provider shutdown failed: {message}")
        self.signal = signal
