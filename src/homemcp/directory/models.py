"""Device graph models — homes, rooms, accessories, and characteristics.

Instances are owned by a :class:`~homemcp.directory.provider.DeviceDirectory`.
The gateway reads them freely but changes them only through directory
operations.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class CharacteristicKind(str, Enum):
    """Characteristics the gateway knows how to drive."""

    POWER_STATE = "power_state"
    BRIGHTNESS = "brightness"
    TARGET_POSITION = "target_position"
    TARGET_DOOR_STATE = "target_door_state"


class DoorState(IntEnum):
    """Raw values of the target-door-state characteristic."""

    OPEN = 0
    CLOSED = 1


class Characteristic(BaseModel):
    kind: CharacteristicKind
    value: Any = None


class Service(BaseModel):
    name: str = ""
    characteristics: list[Characteristic] = []


class Room(BaseModel):
    uuid: UUID = Field(default_factory=uuid4)
    name: str


class Accessory(BaseModel):
    """A controllable device node."""

    uuid: UUID = Field(default_factory=uuid4)
    name: str
    room_uuid: UUID | None = None
    category: str = "Other"
    reachable: bool = True
    firmware: str = "Unknown"
    serial_number: str = "Unknown"
    services: list[Service] = []

    @property
    def kinds(self) -> set[CharacteristicKind]:
        """Every characteristic kind exposed by any of the accessory's services."""
        return {c.kind for service in self.services for c in service.characteristics}

    def characteristic(self, kind: CharacteristicKind) -> Characteristic | None:
        for service in self.services:
            for characteristic in service.characteristics:
                if characteristic.kind == kind:
                    return characteristic
        return None


class Home(BaseModel):
    uuid: UUID = Field(default_factory=uuid4)
    name: str
    rooms: list[Room] = []
    accessories: list[Accessory] = []

    def room(self, room_uuid: UUID | None) -> Room | None:
        if room_uuid is None:
            return None
        for room in self.rooms:
            if room.uuid == room_uuid:
                return room
        return None

    def room_name(self, accessory: Accessory) -> str:
        room = self.room(accessory.room_uuid)
        return room.name if room is not None else "No Room"

    def accessories_in(self, room: Room) -> list[Accessory]:
        return [a for a in self.accessories if a.room_uuid == room.uuid]

    def owns(self, accessory: Accessory) -> bool:
        return any(a.uuid == accessory.uuid for a in self.accessories)
