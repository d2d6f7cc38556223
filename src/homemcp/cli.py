"""HomeMCP CLI entrypoint."""

from __future__ import annotations

import click

from homemcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="homemcp")
def main() -> None:
    """HomeMCP — MCP gateway for a home-automation device graph."""


# Register subcommands
from homemcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
