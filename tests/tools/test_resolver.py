"""Tests for name resolution and control-action mapping."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import UUID

import pytest

from homemcp.directory.models import (
    Accessory,
    Characteristic,
    CharacteristicKind,
    DoorState,
    Home,
    Service,
)
from homemcp.protocols.errors import ApplicationError
from homemcp.tools.resolver import (
    ControlAction,
    ControlKind,
    PendingControl,
    control_characteristic,
    find_accessory,
    find_accessory_by_id,
    find_room,
    find_room_by_id,
    match_accessories,
    match_rooms,
    require_accessory,
    require_room,
    resolve_control,
)


def _named(homes: list[Home], name: str) -> Accessory:
    return next(a for h in homes for a in h.accessories if a.name == name)


def _device(*kinds: CharacteristicKind) -> Accessory:
    return Accessory(
        name="Device",
        services=[Service(characteristics=[Characteristic(kind=k) for k in kinds])],
    )


class TestLookup:
    def test_match_is_case_insensitive_substring(self, homes: list[Home]) -> None:
        found = match_accessories(homes, "LAMP")
        assert [(h.name, a.name) for h, a in found] == [
            ("Main House", "Floor Lamp"),
            ("Cabin", "Cabin Lamp"),
        ]

    def test_find_returns_first_in_enumeration_order(self, homes: list[Home]) -> None:
        found = find_room(homes, "living")
        assert found is not None
        assert found[1].name == "Living Room"

    def test_match_rooms_spans_homes(self, homes: list[Home]) -> None:
        assert [r.name for _, r in match_rooms(homes, "living")] == [
            "Living Room",
            "Cabin Living Room",
        ]

    def test_no_match(self, homes: list[Home]) -> None:
        assert find_accessory(homes, "toaster") is None
        assert match_rooms(homes, "attic") == []

    def test_by_id(self, homes: list[Home]) -> None:
        accessory = find_accessory_by_id(homes, UUID(int=211))
        assert accessory is not None
        assert (accessory[0].name, accessory[1].name) == ("Cabin", "Cabin Lamp")
        room = find_room_by_id(homes, UUID(int=103))
        assert room is not None
        assert room[1].name == "Garage"
        assert find_accessory_by_id(homes, UUID(int=999)) is None
        assert find_room_by_id(homes, UUID(int=201)) is None

    def test_require_raises_with_name(self, homes: list[Home]) -> None:
        with pytest.raises(ApplicationError, match="Accessory 'toaster' not found"):
            require_accessory(homes, "toaster")
        with pytest.raises(ApplicationError, match="Room 'Attic' not found"):
            require_room(homes, "Attic")


class TestControlCharacteristic:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Floor Lamp", ControlKind.POWER),
            ("Bedroom Blinds", ControlKind.POSITION),
            ("Garage Door", ControlKind.DOOR),
            ("Smart Shade", ControlKind.POWER),
        ],
    )
    def test_priority(self, homes: list[Home], name: str, expected: ControlKind) -> None:
        found = control_characteristic(_named(homes, name))
        assert found is not None
        assert found[1] == expected

    def test_nothing_controllable(self, homes: list[Home]) -> None:
        assert control_characteristic(_named(homes, "Temperature Sensor")) is None

    def test_brightness_alone_does_not_qualify(self) -> None:
        assert control_characteristic(_device(CharacteristicKind.BRIGHTNESS)) is None

    def test_position_before_door(self) -> None:
        device = _device(CharacteristicKind.TARGET_DOOR_STATE, CharacteristicKind.TARGET_POSITION)
        assert control_characteristic(device) == (CharacteristicKind.TARGET_POSITION, ControlKind.POSITION)


class TestFixedTargets:
    @pytest.mark.parametrize(
        ("kind", "action", "value", "label"),
        [
            (CharacteristicKind.POWER_STATE, ControlAction.ON, True, "turn on"),
            (CharacteristicKind.POWER_STATE, ControlAction.OFF, False, "turn off"),
            (CharacteristicKind.TARGET_POSITION, ControlAction.ON, 100, "open"),
            (CharacteristicKind.TARGET_POSITION, ControlAction.OFF, 0, "close"),
            (CharacteristicKind.TARGET_DOOR_STATE, ControlAction.ON, DoorState.OPEN, "open"),
            (CharacteristicKind.TARGET_DOOR_STATE, ControlAction.OFF, DoorState.CLOSED, "close"),
        ],
    )
    def test_targets(
        self, kind: CharacteristicKind, action: ControlAction, value: object, label: str
    ) -> None:
        read = MagicMock()
        pending = resolve_control(_device(kind), action, read)
        assert pending.characteristic == kind
        assert pending.value == value
        assert pending.label == label
        read.assert_not_called()


class TestToggle:
    @pytest.mark.parametrize(
        ("kind", "current", "value", "label"),
        [
            (CharacteristicKind.POWER_STATE, True, False, "turn off"),
            (CharacteristicKind.POWER_STATE, False, True, "turn on"),
            (CharacteristicKind.POWER_STATE, 1, False, "turn off"),
            (CharacteristicKind.POWER_STATE, 0, True, "turn on"),
            (CharacteristicKind.POWER_STATE, "on", True, "turn on"),
            (CharacteristicKind.TARGET_POSITION, 70, 0, "close"),
            (CharacteristicKind.TARGET_POSITION, 51, 0, "close"),
            (CharacteristicKind.TARGET_POSITION, 50, 100, "open"),
            (CharacteristicKind.TARGET_POSITION, 0, 100, "open"),
            (CharacteristicKind.TARGET_DOOR_STATE, 1, 0, "open"),
            (CharacteristicKind.TARGET_DOOR_STATE, 0, 1, "close"),
            (CharacteristicKind.TARGET_DOOR_STATE, 2, 1, "close"),
        ],
    )
    def test_from_current_value(
        self, kind: CharacteristicKind, current: object, value: object, label: str
    ) -> None:
        read = MagicMock(return_value=current)
        pending = resolve_control(_device(kind), ControlAction.TOGGLE, read)
        read.assert_called_once_with(kind)
        assert pending.value == value
        assert pending.label == label

    def test_unreadable_state(self) -> None:
        with pytest.raises(ApplicationError, match="Cannot read current state of 'Device'"):
            resolve_control(_device(CharacteristicKind.POWER_STATE), ControlAction.TOGGLE, lambda k: None)

    def test_nothing_controllable(self) -> None:
        with pytest.raises(ApplicationError, match="has no controllable characteristics"):
            resolve_control(_device(CharacteristicKind.BRIGHTNESS), ControlAction.ON, lambda k: None)


class TestPendingControl:
    @pytest.mark.parametrize(
        ("label", "done"),
        [("turn on", "turned on"), ("turn off", "turned off"), ("open", "opened"), ("close", "closed")],
    )
    def test_done_label(self, label: str, done: str) -> None:
        pending = PendingControl(
            kind=ControlKind.POWER,
            characteristic=CharacteristicKind.POWER_STATE,
            value=True,
            label=label,
        )
        assert pending.done_label == done
