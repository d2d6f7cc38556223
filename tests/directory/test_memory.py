"""Tests for InMemoryDirectory and YAML fixtures."""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

import pytest

from homemcp.config import ConfigError
from homemcp.directory.bridge import BridgeStatus, run_bridged
from homemcp.directory.memory import InMemoryDirectory, load_fixture
from homemcp.directory.models import Accessory, CharacteristicKind, Home, Room
from homemcp.directory.provider import DeviceDirectory


def _accessory(directory: InMemoryDirectory, name: str) -> tuple[Home, Accessory]:
    for home in directory.homes():
        for accessory in home.accessories:
            if accessory.name == name:
                return home, accessory
    raise AssertionError(name)


def _room(directory: InMemoryDirectory, name: str) -> tuple[Home, Room]:
    for home in directory.homes():
        for room in home.rooms:
            if room.name == name:
                return home, room
    raise AssertionError(name)


class TestEnumeration:
    def test_satisfies_protocol(self, directory: InMemoryDirectory) -> None:
        assert isinstance(directory, DeviceDirectory)

    def test_homes_in_order(self, directory: InMemoryDirectory) -> None:
        assert [h.name for h in directory.homes()] == ["Main House", "Cabin"]

    def test_empty(self) -> None:
        assert InMemoryDirectory().homes() == ()

    def test_read_characteristic(self, directory: InMemoryDirectory) -> None:
        _, lamp = _accessory(directory, "Floor Lamp")
        assert directory.read_characteristic(lamp, CharacteristicKind.BRIGHTNESS) == 40
        assert directory.read_characteristic(lamp, CharacteristicKind.TARGET_POSITION) is None


class TestMutations:
    async def test_rename_accessory(self, directory: InMemoryDirectory) -> None:
        _, lamp = _accessory(directory, "Floor Lamp")
        outcome = await run_bridged(lambda done: directory.rename_accessory(lamp, "Reading Lamp", done))
        assert outcome.succeeded
        assert lamp.name == "Reading Lamp"

    async def test_rename_room(self, directory: InMemoryDirectory) -> None:
        _, office = _room(directory, "Office")
        outcome = await run_bridged(lambda done: directory.rename_room(office, "Study", done))
        assert outcome.succeeded
        assert office.name == "Study"

    async def test_assign_accessory_to_room(self, directory: InMemoryDirectory) -> None:
        home, lamp = _accessory(directory, "Floor Lamp")
        _, bedroom = _room(directory, "Bedroom")
        outcome = await run_bridged(
            lambda done: directory.assign_accessory_to_room(lamp, bedroom, done)
        )
        assert outcome.succeeded
        assert home.room_name(lamp) == "Bedroom"

    async def test_assign_across_homes_fails(self, directory: InMemoryDirectory) -> None:
        _, lamp = _accessory(directory, "Floor Lamp")
        _, cabin_room = _room(directory, "Cabin Living Room")
        outcome = await run_bridged(
            lambda done: directory.assign_accessory_to_room(lamp, cabin_room, done)
        )
        assert outcome.status == BridgeStatus.FAILED
        assert "not in home 'Main House'" in (outcome.error or "")
        assert lamp.room_uuid == UUID(int=101)

    async def test_write_characteristic(self, directory: InMemoryDirectory) -> None:
        _, lamp = _accessory(directory, "Floor Lamp")
        outcome = await run_bridged(
            lambda done: directory.write_characteristic(lamp, CharacteristicKind.POWER_STATE, True, done)
        )
        assert outcome.succeeded
        assert directory.read_characteristic(lamp, CharacteristicKind.POWER_STATE) is True
        assert directory.writes == [(lamp.uuid, CharacteristicKind.POWER_STATE, True)]

    async def test_write_unreachable_fails(self, directory: InMemoryDirectory) -> None:
        _, plug = _accessory(directory, "Spare Plug")
        outcome = await run_bridged(
            lambda done: directory.write_characteristic(plug, CharacteristicKind.POWER_STATE, True, done)
        )
        assert outcome.status == BridgeStatus.FAILED
        assert outcome.error == "'Spare Plug' is not reachable"
        assert directory.writes == []

    async def test_write_missing_characteristic_fails(self, directory: InMemoryDirectory) -> None:
        _, sensor = _accessory(directory, "Temperature Sensor")
        outcome = await run_bridged(
            lambda done: directory.write_characteristic(
                sensor, CharacteristicKind.POWER_STATE, True, done
            )
        )
        assert outcome.status == BridgeStatus.FAILED
        assert "no power_state characteristic" in (outcome.error or "")


class TestInjectedBehaviour:
    async def test_configured_failure(self, directory: InMemoryDirectory) -> None:
        directory.failures["rename_room"] = "HomeKit refused"
        _, office = _room(directory, "Office")
        outcome = await run_bridged(lambda done: directory.rename_room(office, "Study", done))
        assert outcome.status == BridgeStatus.FAILED
        assert outcome.error == "HomeKit refused"
        assert office.name == "Office"

    async def test_stalled_operation_times_out(self, directory: InMemoryDirectory) -> None:
        directory.stalled.add("rename_accessory")
        _, lamp = _accessory(directory, "Floor Lamp")
        outcome = await run_bridged(
            lambda done: directory.rename_accessory(lamp, "Other", done), timeout=0.05
        )
        assert outcome.timed_out
        assert lamp.name == "Floor Lamp"

    async def test_latency_beyond_timeout(self, homes: list[Home]) -> None:
        directory = InMemoryDirectory(homes, latency=0.2)
        _, lamp = _accessory(directory, "Floor Lamp")
        outcome = await run_bridged(
            lambda done: directory.rename_accessory(lamp, "Late", done), timeout=0.05
        )
        assert outcome.timed_out


_FIXTURE = """\
homes:
  - name: Flat
    rooms:
      - name: Kitchen
      - name: Hall
    accessories:
      - name: Kettle
        room: Kitchen
        category: Outlet
        firmware: "2.0"
        characteristics:
          power_state: false
      - name: Front Door
        room: Hall
        characteristics:
          target_door_state: 1
      - name: Bridge
"""


class TestLoadFixture:
    def test_builds_homes(self, tmp_path: Path) -> None:
        path = tmp_path / "homes.yaml"
        path.write_text(_FIXTURE)

        directory = load_fixture(path)
        (home,) = directory.homes()
        assert home.name == "Flat"
        assert [r.name for r in home.rooms] == ["Kitchen", "Hall"]

        kettle, door, bridge = home.accessories
        assert home.room_name(kettle) == "Kitchen"
        assert kettle.category == "Outlet"
        assert kettle.firmware == "2.0"
        assert directory.read_characteristic(kettle, CharacteristicKind.POWER_STATE) is False
        assert door.kinds == {CharacteristicKind.TARGET_DOOR_STATE}
        assert home.room_name(bridge) == "No Room"
        assert bridge.services == []

    def test_latency(self, tmp_path: Path) -> None:
        path = tmp_path / "homes.yaml"
        path.write_text(_FIXTURE)
        assert load_fixture(path, latency=0.5).latency == 0.5

    def test_unknown_room(self, tmp_path: Path) -> None:
        path = tmp_path / "homes.yaml"
        path.write_text("homes:\n  - name: Flat\n    accessories:\n      - name: Lamp\n        room: Attic\n")
        with pytest.raises(ConfigError, match="unknown room 'Attic'"):
            load_fixture(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "homes.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_fixture(path)

    def test_bad_characteristic(self, tmp_path: Path) -> None:
        path = tmp_path / "homes.yaml"
        path.write_text("homes:\n  - name: Flat\n    accessories:\n      - name: Fan\n        characteristics:\n          rotation_speed: 3\n")
        with pytest.raises(ConfigError, match="Invalid fixture"):
            load_fixture(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_fixture(tmp_path / "absent.yaml")
