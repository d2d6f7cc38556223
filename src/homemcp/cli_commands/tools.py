"""``homemcp tools`` — inspect the tool catalog."""

from __future__ import annotations

import click

from homemcp.cli_commands._output import print_tools_table


@click.group()
def tools() -> None:
    """Inspect the MCP tools this server exposes."""


@tools.command("list")
def list_tools() -> None:
    """List every tool with its required arguments."""
    from homemcp.protocols.mcp.catalog import TOOLS

    print_tools_table(TOOLS)
