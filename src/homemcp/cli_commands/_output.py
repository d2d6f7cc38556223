"""Shared CLI output formatters."""

from __future__ import annotations

import json
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from homemcp.directory.models import Home  # noqa: TC001
from homemcp.protocols.mcp.models import MCPToolDef  # noqa: TC001

console = Console()


def print_tools_table(tools: Sequence[MCPToolDef]) -> None:
    """Pretty-print tool descriptors as a table."""
    table = Table(title="MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Required")
    table.add_column("Description")

    for tool in tools:
        table.add_row(tool.name, ", ".join(tool.required) or "-", _truncate(tool.description))

    console.print(table)


def print_homes(homes: Sequence[Home], *, as_json: bool = False) -> None:
    """Pretty-print every home with its rooms and accessories."""
    if as_json:
        console.print_json(json.dumps([home.model_dump(mode="json") for home in homes]))
        return

    if not homes:
        console.print("[yellow]No homes found[/yellow]")
        return

    for home in homes:
        console.print(f"\n[bold]🏠 Home: {home.name}[/bold]")
        console.print(f"   UUID: {home.uuid}")

        console.print(f"\n  📍 Rooms ({len(home.rooms)}):")
        for room in home.rooms:
            console.print(f"    • {room.name} (UUID: {room.uuid})")

        table = Table(title=f"🔌 Accessories ({len(home.accessories)})")
        table.add_column("Name", style="cyan")
        table.add_column("Room")
        table.add_column("Category")
        table.add_column("Reachable")
        table.add_column("Characteristics")
        table.add_column("UUID")
        for accessory in home.accessories:
            table.add_row(
                accessory.name,
                home.room_name(accessory),
                accessory.category,
                "yes" if accessory.reachable else "no",
                ", ".join(sorted(kind.value for kind in accessory.kinds)) or "-",
                str(accessory.uuid),
            )
        console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
