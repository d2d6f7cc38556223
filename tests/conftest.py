"""Shared fixtures: a small two-home device graph."""

from __future__ import annotations

from uuid import UUID

import pytest

from homemcp.config import ServerConfig
from homemcp.directory.memory import InMemoryDirectory
from homemcp.directory.models import (
    Accessory,
    Characteristic,
    CharacteristicKind,
    Home,
    Room,
    Service,
)


def _uuid(n: int) -> UUID:
    return UUID(int=n)


def _accessory(
    n: int,
    name: str,
    room: Room | None,
    category: str,
    characteristics: dict[CharacteristicKind, object],
    **extra: object,
) -> Accessory:
    service = Service(
        name=name,
        characteristics=[Characteristic(kind=k, value=v) for k, v in characteristics.items()],
    )
    return Accessory(
        uuid=_uuid(n),
        name=name,
        room_uuid=room.uuid if room is not None else None,
        category=category,
        services=[service] if characteristics else [],
        **extra,  # type: ignore[arg-type]
    )


def make_homes() -> list[Home]:
    living = Room(uuid=_uuid(101), name="Living Room")
    bedroom = Room(uuid=_uuid(102), name="Bedroom")
    garage = Room(uuid=_uuid(103), name="Garage")
    office = Room(uuid=_uuid(104), name="Office")
    main = Home(
        uuid=_uuid(1),
        name="Main House",
        rooms=[living, bedroom, garage, office],
        accessories=[
            _accessory(
                201,
                "Floor Lamp",
                living,
                "Lightbulb",
                {CharacteristicKind.POWER_STATE: False, CharacteristicKind.BRIGHTNESS: 40},
                firmware="1.2.3",
                serial_number="FL-001",
            ),
            _accessory(202, "Ceiling Light", bedroom, "Lightbulb", {CharacteristicKind.POWER_STATE: True}),
            _accessory(
                203, "Bedroom Blinds", bedroom, "Window Covering", {CharacteristicKind.TARGET_POSITION: 70}
            ),
            _accessory(
                204, "Garage Door", garage, "Garage Door Opener", {CharacteristicKind.TARGET_DOOR_STATE: 1}
            ),
            _accessory(
                205,
                "Smart Shade",
                office,
                "Window Covering",
                {CharacteristicKind.TARGET_POSITION: 30, CharacteristicKind.POWER_STATE: False},
            ),
            _accessory(206, "Temperature Sensor", office, "Sensor", {}),
            _accessory(
                207, "Spare Plug", None, "Outlet", {CharacteristicKind.POWER_STATE: None}, reachable=False
            ),
        ],
    )

    cabin_living = Room(uuid=_uuid(111), name="Cabin Living Room")
    cabin = Home(
        uuid=_uuid(2),
        name="Cabin",
        rooms=[cabin_living],
        accessories=[
            _accessory(
                211, "Cabin Lamp", cabin_living, "Lightbulb", {CharacteristicKind.POWER_STATE: False}
            ),
        ],
    )
    return [main, cabin]


@pytest.fixture
def homes() -> list[Home]:
    return make_homes()


@pytest.fixture
def directory(homes: list[Home]) -> InMemoryDirectory:
    return InMemoryDirectory(homes)


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(host="127.0.0.1", port=0, bridge_timeout=0.2)
