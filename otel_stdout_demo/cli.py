"""
Command-line interface for otel-stdout-demo.

Usage:
    otel-stdout-demo           # Run the demo (same as `run`)
    otel-stdout-demo run       # Emit a log, a span and metrics to stdout
    otel-stdout-demo resource  # Show the resource attached to every signal
"""

import os
import sys

import click

from otel_stdout_demo.config.settings import get_settings
from otel_stdout_demo.observability.logging import setup_logging


@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """OpenTelemetry stdout demo - spans, metrics and logs printed to the console."""
    if debug:
        os.environ["OTEL_DEMO_LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging(get_settings().log_level)

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command()
def run() -> None:
    """Initialize providers, emit one of each signal, then shut down."""
    from otel_stdout_demo.observability.errors import ProviderShutdownError
    from otel_stdout_demo.runner import run_demo

    try:
        run_demo(get_settings())
    except ProviderShutdownError as e:
        click.echo(click.style(f"Shutdown failed: {e}", fg="red"), err=True)
        sys.exit(1)


@main.command()
def resource() -> None:
    """Show the resource attributes attached to every signal."""
    from otel_stdout_demo.observability.resource import get_resource

    attributes = get_resource(get_settings().service_name).attributes

    click.echo("\nResource Attributes:")
    click.echo("-" * 40)
    for key in sorted(attributes):
        click.echo(f"  {key}: {attributes[key]}")
    click.echo("-" * 40)
