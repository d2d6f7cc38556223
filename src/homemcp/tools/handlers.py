"""HomeTools — the twelve MCP tools over a DeviceDirectory.

Every handler returns a :class:`ToolResult` whose text is meant for people
and whose ``meta`` (``result._meta`` on the wire) carries the same data for
programs. Malformed arguments and unresolvable names raise protocol
errors. Directory mutations that fail or time out do *not* raise: the
request was valid, so the outcome is reported as text.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any
from uuid import UUID

from homemcp.directory.bridge import DEFAULT_TIMEOUT, BridgeOutcome, BridgeStatus, run_bridged
from homemcp.directory.models import Accessory, Home, Room
from homemcp.directory.provider import DeviceDirectory
from homemcp.protocols.errors import ApplicationError, InvalidParamsError, ToolNotFoundError
from homemcp.protocols.mcp.catalog import TOOLS
from homemcp.protocols.mcp.models import MCPToolDef, ToolResult
from homemcp.tools.resolver import (
    ControlAction,
    find_accessory_by_id,
    find_room_by_id,
    match_accessories,
    match_rooms,
    require_accessory,
    require_room,
    resolve_control,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


def _require_strings(arguments: dict[str, Any], *keys: str) -> tuple[str, ...]:
    """Return the string values of *keys*; raise naming the ones missing."""
    missing = [key for key in keys if not isinstance(arguments.get(key), str)]
    if missing:
        names = " and ".join(f"'{key}'" for key in missing)
        noun = "parameter" if len(missing) == 1 else "parameters"
        raise InvalidParamsError(f"Missing {names} {noun}")
    return tuple(arguments[key] for key in keys)


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


def _accessory_entry(home: Home, accessory: Accessory, *, detailed: bool = True) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "name": accessory.name,
        "room": home.room_name(accessory),
        "uuid": str(accessory.uuid),
        "home": home.name,
        "category": accessory.category,
        "reachable": accessory.reachable,
    }
    if detailed:
        entry["firmware"] = accessory.firmware
        entry["serial_number"] = accessory.serial_number
    return entry


def _room_entry(home: Home, room: Room) -> dict[str, Any]:
    return {"name": room.name, "uuid": str(room.uuid), "home": home.name}


def _room_line(room: dict[str, Any]) -> str:
    return f"• {room['name']} (UUID: {room['uuid']})"


class HomeTools:
    """Satisfies the :class:`~homemcp.protocols.provider.ToolProvider` protocol.

    Usage::

        tools = HomeTools(directory)
        result = await tools.call_tool("accessory_toggle", {"accessory_name": "lamp"})
        print(result.text)
    """

    def __init__(self, directory: DeviceDirectory, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._directory = directory
        self._timeout = timeout
        self._handlers: dict[str, ToolHandler] = {
            "get_all_accessories": self.get_all_accessories,
            "get_all_rooms": self.get_all_rooms,
            "set_accessory_room": self.set_accessory_room,
            "get_accessory_by_name": self.get_accessory_by_name,
            "get_room_by_name": self.get_room_by_name,
            "set_accessory_room_by_name": self.set_accessory_room_by_name,
            "rename_accessory": self.rename_accessory,
            "rename_room": self.rename_room,
            "get_room_accessories": self.get_room_accessories,
            "accessory_on": self.accessory_on,
            "accessory_off": self.accessory_off,
            "accessory_toggle": self.accessory_toggle,
        }

    def tool_definitions(self) -> Sequence[MCPToolDef]:
        return TOOLS

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(name)
        logger.info("Calling tool %s with %s", name, arguments)
        return await handler(arguments)

    # -- queries -------------------------------------------------------------

    async def get_all_accessories(self, arguments: dict[str, Any]) -> ToolResult:
        accessories = [
            _accessory_entry(home, accessory)
            for home in self._directory.homes()
            for accessory in home.accessories
        ]
        lines = [
            f"• {a['name']} ({a['category']}) - Room: {a['room']}, UUID: {a['uuid']}, "
            f"FW: {a['firmware']}, S/N: {a['serial_number']}"
            for a in accessories
        ]
        text = f"Found {len(accessories)} accessories:\n" + "\n".join(lines)
        return ToolResult.from_text(text, meta={"accessories": accessories})

    async def get_all_rooms(self, arguments: dict[str, Any]) -> ToolResult:
        rooms = [_room_entry(home, room) for home in self._directory.homes() for room in home.rooms]
        text = f"Found {len(rooms)} rooms:\n" + "\n".join(_room_line(r) for r in rooms)
        return ToolResult.from_text(text, meta={"rooms": rooms})

    async def get_accessory_by_name(self, arguments: dict[str, Any]) -> ToolResult:
        (name,) = _require_strings(arguments, "name")
        found = [
            _accessory_entry(home, accessory, detailed=False)
            for home, accessory in match_accessories(self._directory.homes(), name)
        ]
        if not found:
            text = f"No accessories found matching '{name}'"
        else:
            text = f"Found {len(found)} accessories matching '{name}':\n" + "\n".join(
                f"• {a['name']} ({a['category']}) - Room: {a['room']}, UUID: {a['uuid']}"
                for a in found
            )
        return ToolResult.from_text(text, meta={"accessories": found})

    async def get_room_by_name(self, arguments: dict[str, Any]) -> ToolResult:
        (name,) = _require_strings(arguments, "name")
        found = [_room_entry(home, room) for home, room in match_rooms(self._directory.homes(), name)]
        if not found:
            text = f"No rooms found matching '{name}'"
        else:
            text = f"Found {len(found)} rooms matching '{name}':\n" + "\n".join(
                _room_line(r) for r in found
            )
        return ToolResult.from_text(text, meta={"rooms": found})

    async def get_room_accessories(self, arguments: dict[str, Any]) -> ToolResult:
        (room_name,) = _require_strings(arguments, "room_name")
        home, room = require_room(self._directory.homes(), room_name)

        accessories = [
            _accessory_entry(home, accessory) for accessory in home.accessories_in(room)
        ]
        for entry in accessories:
            # home and room are implied by the query
            del entry["home"], entry["room"]

        if not accessories:
            text = f"No accessories found in room '{room.name}'"
        else:
            text = f"Found {len(accessories)} accessories in '{room.name}':\n" + "\n".join(
                f"• {a['name']} ({a['category']}) {'🟢' if a['reachable'] else '🔴'} - "
                f"UUID: {a['uuid']}, FW: {a['firmware']}, S/N: {a['serial_number']}"
                for a in accessories
            )
        meta = {"room": {"name": room.name, "uuid": str(room.uuid)}, "accessories": accessories}
        return ToolResult.from_text(text, meta=meta)

    # -- room assignment -----------------------------------------------------

    async def set_accessory_room(self, arguments: dict[str, Any]) -> ToolResult:
        raw_accessory, raw_room = _require_strings(arguments, "accessory_uuid", "room_uuid")
        accessory_id = _parse_uuid(raw_accessory)
        room_id = _parse_uuid(raw_room)
        if accessory_id is None or room_id is None:
            raise InvalidParamsError("Invalid UUIDs")

        homes = self._directory.homes()
        found_accessory = find_accessory_by_id(homes, accessory_id)
        found_room = find_room_by_id(homes, room_id)
        if found_accessory is None or found_room is None:
            raise ApplicationError("Accessory or room not found")

        home, accessory = found_accessory
        _, room = found_room
        return await self._move(home, accessory, room)

    async def set_accessory_room_by_name(self, arguments: dict[str, Any]) -> ToolResult:
        accessory_name, room_name = _require_strings(arguments, "accessory_name", "room_name")
        homes = self._directory.homes()
        home, accessory = require_accessory(homes, accessory_name)
        _, room = require_room(homes, room_name)
        return await self._move(home, accessory, room)

    async def _move(self, home: Home, accessory: Accessory, room: Room) -> ToolResult:
        if accessory.room_uuid == room.uuid:
            return ToolResult.from_text(f"ℹ️ {accessory.name} is already in {room.name}")

        logger.info(
            "Moving %s from %s to %s", accessory.name, home.room_name(accessory), room.name
        )
        outcome = await run_bridged(
            lambda done: self._directory.assign_accessory_to_room(accessory, room, done),
            timeout=self._timeout,
            label="assign_accessory_to_room",
        )
        return self._report(
            outcome,
            success=f"Successfully moved {accessory.name} to {room.name}",
            failure=f"Failed to move {accessory.name} to {room.name}",
        )

    # -- renaming ------------------------------------------------------------

    async def rename_accessory(self, arguments: dict[str, Any]) -> ToolResult:
        accessory_name, new_name = _require_strings(arguments, "accessory_name", "new_name")
        _, accessory = require_accessory(self._directory.homes(), accessory_name)
        old_name = accessory.name

        outcome = await run_bridged(
            lambda done: self._directory.rename_accessory(accessory, new_name, done),
            timeout=self._timeout,
            label="rename_accessory",
        )
        return self._report(
            outcome,
            success=f"Successfully renamed '{old_name}' to '{new_name}'",
            failure=f"Failed to rename '{old_name}' to '{new_name}'",
        )

    async def rename_room(self, arguments: dict[str, Any]) -> ToolResult:
        room_name, new_name = _require_strings(arguments, "room_name", "new_name")
        _, room = require_room(self._directory.homes(), room_name)
        old_name = room.name

        outcome = await run_bridged(
            lambda done: self._directory.rename_room(room, new_name, done),
            timeout=self._timeout,
            label="rename_room",
        )
        return self._report(
            outcome,
            success=f"Successfully renamed '{old_name}' to '{new_name}'",
            failure=f"Failed to rename '{old_name}' to '{new_name}'",
        )

    # -- control -------------------------------------------------------------

    async def accessory_on(self, arguments: dict[str, Any]) -> ToolResult:
        return await self._control(arguments, ControlAction.ON)

    async def accessory_off(self, arguments: dict[str, Any]) -> ToolResult:
        return await self._control(arguments, ControlAction.OFF)

    async def accessory_toggle(self, arguments: dict[str, Any]) -> ToolResult:
        return await self._control(arguments, ControlAction.TOGGLE)

    async def _control(self, arguments: dict[str, Any], action: ControlAction) -> ToolResult:
        (accessory_name,) = _require_strings(arguments, "accessory_name")
        _, accessory = require_accessory(self._directory.homes(), accessory_name)

        pending = resolve_control(
            accessory,
            action,
            lambda kind: self._directory.read_characteristic(accessory, kind),
        )
        logger.info(
            "%s %s: writing %s=%r",
            pending.label,
            accessory.name,
            pending.characteristic.value,
            pending.value,
        )
        outcome = await run_bridged(
            lambda done: self._directory.write_characteristic(
                accessory, pending.characteristic, pending.value, done
            ),
            timeout=self._timeout,
            label="write_characteristic",
        )
        return self._report(
            outcome,
            success=f"Successfully {pending.done_label} '{accessory.name}'",
            failure=f"Failed to {pending.label} '{accessory.name}'",
        )

    def _report(self, outcome: BridgeOutcome, *, success: str, failure: str) -> ToolResult:
        if outcome.status == BridgeStatus.SUCCEEDED:
            return ToolResult.from_text(f"✅ {success}")
        if outcome.status == BridgeStatus.FAILED:
            return ToolResult.from_text(f"❌ {failure}: {outcome.error}")
        return ToolResult.from_text(
            f"⏰ Operation timed out after {self._timeout:g} seconds - "
            "HomeKit may be busy. Try again later."
        )
