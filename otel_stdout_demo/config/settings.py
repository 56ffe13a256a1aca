"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_NAME = "demo-python-opentelemetry-stdout"


class Settings(BaseSettings):
    """
    Configuration for the OpenTelemetry stdout demo.

    All settings can be overridden via environment variables with the
    ``OTEL_DEMO_`` prefix (e.g. ``OTEL_DEMO_LOG_LEVEL=DEBUG``). With nothing
    set, the demo runs with its built-in service name and the SDK defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="OTEL_DEMO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Resource
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        min_length=1,
        description="service.name attached to every span, metric and log record",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Metrics
    metric_export_interval_millis: float | None = Field(
        default=None,
        gt=0,
        description="Periodic metric export interval (None = SDK default, 60s)",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
