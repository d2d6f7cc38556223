"""Static tool catalog served by ``tools/list``.

Built once at import time and never mutated. New tools are appended;
existing entries keep their names and required arguments.
"""

from __future__ import annotations

from homemcp.protocols.mcp.models import MCPToolDef


def _tool(name: str, description: str, /, **params: str) -> MCPToolDef:
    """Build a descriptor whose string parameters are all required."""
    return MCPToolDef(
        name=name,
        description=description,
        input_schema={
            "type": "object",
            "properties": {
                key: {"type": "string", "description": text} for key, text in params.items()
            },
            "required": list(params),
        },
    )


TOOLS: tuple[MCPToolDef, ...] = (
    _tool(
        "get_all_accessories",
        "Get all HomeKit accessories with their names, rooms, and UUIDs",
    ),
    _tool(
        "get_all_rooms",
        "Get all HomeKit rooms with their names and UUIDs",
    ),
    _tool(
        "set_accessory_room",
        "Move an accessory to a different room using UUIDs",
        accessory_uuid="UUID of the accessory to move",
        room_uuid="UUID of the target room",
    ),
    _tool(
        "get_accessory_by_name",
        "Find a HomeKit accessory by name",
        name="Name or partial name of the accessory to find",
    ),
    _tool(
        "get_room_by_name",
        "Find a HomeKit room by name",
        name="Name or partial name of the room to find",
    ),
    _tool(
        "set_accessory_room_by_name",
        "Move an accessory to a different room using names",
        accessory_name="Name of the accessory to move",
        room_name="Name of the target room",
    ),
    _tool(
        "rename_accessory",
        "Rename a HomeKit accessory",
        accessory_name="Current name of the accessory to rename",
        new_name="New name for the accessory",
    ),
    _tool(
        "rename_room",
        "Rename a HomeKit room",
        room_name="Current name of the room to rename",
        new_name="New name for the room",
    ),
    _tool(
        "get_room_accessories",
        "Get all accessories in a specific room",
        room_name="Name of the room to get accessories from",
    ),
    _tool(
        "accessory_on",
        "Turn on an accessory (lights, switches) or open covers",
        accessory_name="Name of the accessory to turn on",
    ),
    _tool(
        "accessory_off",
        "Turn off an accessory (lights, switches) or close covers",
        accessory_name="Name of the accessory to turn off",
    ),
    _tool(
        "accessory_toggle",
        "Toggle an accessory (lights, switches, covers) between on/off or open/close",
        accessory_name="Name of the accessory to toggle",
    ),
)

TOOL_NAMES: tuple[str, ...] = tuple(tool.name for tool in TOOLS)
