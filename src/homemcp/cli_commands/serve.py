"""``homemcp serve`` — run the HTTP MCP gateway."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from homemcp.cli_commands._output import console


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Server configuration YAML file.",
)
@click.option("--host", default=None, help="Interface to bind.")
@click.option("--port", "-p", type=int, default=None, help="Port to bind.")
@click.option(
    "--fixture",
    "-f",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Directory fixture YAML file to serve.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    show_default=True,
)
@click.option("--trace", is_flag=True, help="Export OpenTelemetry spans to the console.")
def serve(
    config_path: str | None,
    host: str | None,
    port: int | None,
    fixture: str | None,
    log_level: str,
    trace: bool,
) -> None:
    """Serve the device directory over MCP until interrupted."""
    from homemcp.config import ConfigError, ServerConfig, load_config
    from homemcp.directory.memory import InMemoryDirectory, load_fixture
    from homemcp.transport.server import run_server
    from homemcp.utils.telemetry import configure_telemetry

    _configure_logging(log_level)

    try:
        config = load_config(config_path) if config_path else ServerConfig()
        overrides = {"host": host, "port": port, "directory_fixture": Path(fixture) if fixture else None}
        config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})
        directory = (
            load_fixture(config.directory_fixture)
            if config.directory_fixture is not None
            else InMemoryDirectory()
        )
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    if trace:
        try:
            configure_telemetry(service_name=config.server_name)
        except ImportError as exc:
            console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    console.print(f"Serving MCP at [cyan]{config.mcp_url}[/cyan]")
    try:
        asyncio.run(run_server(directory, config))
    except KeyboardInterrupt:
        console.print("Stopped.")
    except OSError as exc:
        console.print(f"[red]Server error:[/red] {exc}")
        sys.exit(1)
