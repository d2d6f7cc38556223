"""``homemcp homes`` — inspect a directory fixture."""

from __future__ import annotations

import sys

import click

from homemcp.cli_commands._output import console, print_homes


@click.group()
def homes() -> None:
    """Inspect homes, rooms, and accessories."""


@homes.command("show")
@click.option(
    "--fixture",
    "-f",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Directory fixture YAML file.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def show(fixture: str, as_json: bool) -> None:
    """Print every home with its rooms and accessories."""
    from homemcp.config import ConfigError
    from homemcp.directory.memory import load_fixture

    try:
        directory = load_fixture(fixture)
    except ConfigError as exc:
        console.print(f"[red]Fixture error:[/red] {exc}")
        sys.exit(1)

    print_homes(directory.homes(), as_json=as_json)
