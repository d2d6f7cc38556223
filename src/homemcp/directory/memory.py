"""InMemoryDirectory — a DeviceDirectory backed by plain models.

Serves as the directory behind ``homemcp serve`` (loaded from a YAML
fixture) and as the fake directory in tests. Mutations complete on the
running event loop after ``latency`` seconds. Individual operations can be
told to fail or to never complete.

Fixture YAML::

    homes:
      - name: Home
        rooms:
          - name: Living Room
          - name: Bedroom
        accessories:
          - name: Floor Lamp
            room: Living Room
            category: Lightbulb
            characteristics:
              power_state: false
              brightness: 40
          - name: Blinds
            room: Bedroom
            category: Window Covering
            characteristics:
              target_position: 70
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ValidationError

from homemcp.config import ConfigError, read_yaml
from homemcp.directory.models import (
    Accessory,
    Characteristic,
    CharacteristicKind,
    Home,
    Room,
    Service,
)
from homemcp.directory.provider import Completion, DirectoryError

logger = logging.getLogger(__name__)


class InMemoryDirectory:
    """Satisfies the :class:`~homemcp.directory.provider.DeviceDirectory` protocol."""

    def __init__(self, homes: Iterable[Home] = (), *, latency: float = 0.0) -> None:
        self._homes: list[Home] = list(homes)
        self.latency = latency
        # operation name -> error message reported instead of applying it
        self.failures: dict[str, str] = {}
        # operation names whose completion is never delivered
        self.stalled: set[str] = set()
        self.writes: list[tuple[UUID, CharacteristicKind, Any]] = []

    def homes(self) -> Sequence[Home]:
        return tuple(self._homes)

    # -- mutations -----------------------------------------------------------

    def assign_accessory_to_room(
        self, accessory: Accessory, room: Room, completion: Completion
    ) -> None:
        def apply() -> None:
            home = self._home_of(accessory)
            if home.room(room.uuid) is None:
                raise DirectoryError(f"Room '{room.name}' is not in home '{home.name}'")
            accessory.room_uuid = room.uuid

        self._complete("assign_accessory_to_room", apply, completion)

    def rename_accessory(
        self, accessory: Accessory, new_name: str, completion: Completion
    ) -> None:
        def apply() -> None:
            accessory.name = new_name

        self._complete("rename_accessory", apply, completion)

    def rename_room(self, room: Room, new_name: str, completion: Completion) -> None:
        def apply() -> None:
            room.name = new_name

        self._complete("rename_room", apply, completion)

    def write_characteristic(
        self,
        accessory: Accessory,
        kind: CharacteristicKind,
        value: Any,
        completion: Completion,
    ) -> None:
        def apply() -> None:
            characteristic = accessory.characteristic(kind)
            if characteristic is None:
                raise DirectoryError(f"'{accessory.name}' has no {kind.value} characteristic")
            if not accessory.reachable:
                raise DirectoryError(f"'{accessory.name}' is not reachable")
            characteristic.value = value
            self.writes.append((accessory.uuid, kind, value))

        self._complete("write_characteristic", apply, completion)

    # -- reads ---------------------------------------------------------------

    def read_characteristic(self, accessory: Accessory, kind: CharacteristicKind) -> Any:
        characteristic = accessory.characteristic(kind)
        return characteristic.value if characteristic is not None else None

    # -- internals -----------------------------------------------------------

    def _home_of(self, accessory: Accessory) -> Home:
        for home in self._homes:
            if home.owns(accessory):
                return home
        raise DirectoryError(f"Could not find home for accessory {accessory.name}")

    def _complete(
        self, operation: str, apply: Callable[[], None], completion: Completion
    ) -> None:
        if operation in self.stalled:
            logger.debug("%s stalled; completion will not fire", operation)
            return

        def finish() -> None:
            failure = self.failures.get(operation)
            if failure is not None:
                completion(DirectoryError(failure))
                return
            try:
                apply()
            except DirectoryError as exc:
                completion(exc)
                return
            completion(None)

        asyncio.get_running_loop().call_later(self.latency, finish)


# ---------------------------------------------------------------------------
# YAML fixtures
# ---------------------------------------------------------------------------


class FixtureAccessory(BaseModel):
    name: str
    uuid: UUID = Field(default_factory=uuid4)
    room: str | None = None
    category: str = "Other"
    reachable: bool = True
    firmware: str = "Unknown"
    serial_number: str = "Unknown"
    characteristics: dict[CharacteristicKind, Any] = {}
    services: list[Service] = []


class FixtureHome(BaseModel):
    name: str
    uuid: UUID = Field(default_factory=uuid4)
    rooms: list[Room] = []
    accessories: list[FixtureAccessory] = []

    def build(self) -> Home:
        rooms_by_name = {room.name: room for room in self.rooms}
        accessories: list[Accessory] = []
        for spec in self.accessories:
            room_uuid = None
            if spec.room is not None:
                room = rooms_by_name.get(spec.room)
                if room is None:
                    msg = f"accessory '{spec.name}' references unknown room '{spec.room}'"
                    raise ValueError(msg)
                room_uuid = room.uuid

            services = list(spec.services)
            if spec.characteristics:
                services.insert(
                    0,
                    Service(
                        name=spec.name,
                        characteristics=[
                            Characteristic(kind=kind, value=value)
                            for kind, value in spec.characteristics.items()
                        ],
                    ),
                )
            accessories.append(
                Accessory(
                    uuid=spec.uuid,
                    name=spec.name,
                    room_uuid=room_uuid,
                    category=spec.category,
                    reachable=spec.reachable,
                    firmware=spec.firmware,
                    serial_number=spec.serial_number,
                    services=services,
                )
            )
        return Home(uuid=self.uuid, name=self.name, rooms=list(self.rooms), accessories=accessories)


class DirectoryFixture(BaseModel):
    homes: list[FixtureHome] = []


def load_fixture(path: str | Path, *, latency: float = 0.0) -> InMemoryDirectory:
    """Build an :class:`InMemoryDirectory` from a YAML fixture file.

    Raises:
        ConfigError: On I/O, YAML, or schema errors.
    """
    p = Path(path)
    data = read_yaml(p)
    if not isinstance(data, dict):
        raise ConfigError(f"Fixture {p} must be a mapping with a 'homes' list")

    try:
        fixture = DirectoryFixture.model_validate(data)
        homes = [home.build() for home in fixture.homes]
    except (ValidationError, ValueError) as exc:
        raise ConfigError(f"Invalid fixture {p}: {exc}") from exc

    logger.info("Loaded %d home(s) from %s", len(homes), p)
    return InMemoryDirectory(homes, latency=latency)
