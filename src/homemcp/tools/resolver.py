"""Accessory resolver — from names and identifiers to directory objects.

Name lookups are case-insensitive substring matches. The ``find_*``
functions return the *first* match in enumeration order (homes in order,
then the home's accessories or rooms in order) with no ambiguity check.
The ``match_*`` functions return every match.

Control resolution picks which characteristic an on/off/toggle request
drives and which value to write.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from homemcp.directory.models import (
    Accessory,
    CharacteristicKind,
    DoorState,
    Home,
    Room,
)
from homemcp.protocols.errors import ApplicationError

# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def _contains(name: str, fragment: str) -> bool:
    return fragment.lower() in name.lower()


def match_accessories(homes: Iterable[Home], fragment: str) -> list[tuple[Home, Accessory]]:
    return [(home, a) for home in homes for a in home.accessories if _contains(a.name, fragment)]


def match_rooms(homes: Iterable[Home], fragment: str) -> list[tuple[Home, Room]]:
    return [(home, r) for home in homes for r in home.rooms if _contains(r.name, fragment)]


def find_accessory(homes: Iterable[Home], fragment: str) -> tuple[Home, Accessory] | None:
    return next(iter(match_accessories(homes, fragment)), None)


def find_room(homes: Iterable[Home], fragment: str) -> tuple[Home, Room] | None:
    return next(iter(match_rooms(homes, fragment)), None)


def find_accessory_by_id(homes: Iterable[Home], accessory_id: UUID) -> tuple[Home, Accessory] | None:
    for home in homes:
        for accessory in home.accessories:
            if accessory.uuid == accessory_id:
                return home, accessory
    return None


def find_room_by_id(homes: Iterable[Home], room_id: UUID) -> tuple[Home, Room] | None:
    for home in homes:
        for room in home.rooms:
            if room.uuid == room_id:
                return home, room
    return None


def require_accessory(homes: Iterable[Home], fragment: str) -> tuple[Home, Accessory]:
    found = find_accessory(homes, fragment)
    if found is None:
        raise ApplicationError(f"Accessory '{fragment}' not found")
    return found


def require_room(homes: Iterable[Home], fragment: str) -> tuple[Home, Room]:
    found = find_room(homes, fragment)
    if found is None:
        raise ApplicationError(f"Room '{fragment}' not found")
    return found


# ---------------------------------------------------------------------------
# Control actions
# ---------------------------------------------------------------------------


class ControlAction(str, Enum):
    ON = "on"
    OFF = "off"
    TOGGLE = "toggle"


class ControlKind(str, Enum):
    POWER = "power"
    POSITION = "position"
    DOOR = "door"


# Scanned in order; the first kind the accessory exposes wins.
CONTROL_PRIORITY: tuple[tuple[CharacteristicKind, ControlKind], ...] = (
    (CharacteristicKind.POWER_STATE, ControlKind.POWER),
    (CharacteristicKind.TARGET_POSITION, ControlKind.POSITION),
    (CharacteristicKind.TARGET_DOOR_STATE, ControlKind.DOOR),
)

_PAST_TENSE = {
    "turn on": "turned on",
    "turn off": "turned off",
    "open": "opened",
    "close": "closed",
}


class PendingControl(BaseModel):
    """A resolved write, alive only for the request that produced it."""

    kind: ControlKind
    characteristic: CharacteristicKind
    value: bool | int
    label: str

    @property
    def done_label(self) -> str:
        return _PAST_TENSE.get(self.label, self.label)


def control_characteristic(accessory: Accessory) -> tuple[CharacteristicKind, ControlKind] | None:
    """Return the characteristic an on/off/toggle request should drive.

    Brightness never qualifies on its own: a dimmable light is switched
    through its power state, which ranks first anyway.
    """
    exposed = accessory.kinds
    for characteristic, kind in CONTROL_PRIORITY:
        if characteristic in exposed:
            return characteristic, kind
    return None


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


def resolve_control(
    accessory: Accessory,
    action: ControlAction,
    read: Callable[[CharacteristicKind], Any],
) -> PendingControl:
    """Map *action* onto a concrete characteristic write for *accessory*.

    *read* is called only for :attr:`ControlAction.TOGGLE`, which decides
    the target from the current value.

    Raises:
        ApplicationError: If nothing is controllable or the current state
            needed for a toggle cannot be read.
    """
    found = control_characteristic(accessory)
    if found is None:
        raise ApplicationError(f"Accessory '{accessory.name}' has no controllable characteristics")
    characteristic, kind = found

    if action == ControlAction.TOGGLE:
        current = read(characteristic)
        if current is None:
            raise ApplicationError(f"Cannot read current state of '{accessory.name}'")
        value, label = _toggle_target(kind, current)
    else:
        value, label = _fixed_target(kind, on=action == ControlAction.ON)

    return PendingControl(kind=kind, characteristic=characteristic, value=value, label=label)


def _fixed_target(kind: ControlKind, *, on: bool) -> tuple[bool | int, str]:
    if kind == ControlKind.POWER:
        return (True, "turn on") if on else (False, "turn off")
    if kind == ControlKind.POSITION:
        return (100, "open") if on else (0, "close")
    return (int(DoorState.OPEN), "open") if on else (int(DoorState.CLOSED), "close")


def _toggle_target(kind: ControlKind, current: Any) -> tuple[bool | int, str]:
    if kind == ControlKind.POWER:
        is_on = bool(current) if isinstance(current, int) else False
        return (False, "turn off") if is_on else (True, "turn on")
    if kind == ControlKind.POSITION:
        position = _as_int(current, 0)
        return (0, "close") if position > 50 else (100, "open")
    door = _as_int(current, int(DoorState.CLOSED))
    if door == DoorState.CLOSED:
        return int(DoorState.OPEN), "open"
    return int(DoorState.CLOSED), "close"
