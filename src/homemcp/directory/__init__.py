"""Device directory — the home graph, its capability interface, and the sync bridge."""

from homemcp.directory.bridge import BridgeOutcome, BridgeStatus, run_bridged
from homemcp.directory.memory import InMemoryDirectory, load_fixture
from homemcp.directory.models import (
    Accessory,
    Characteristic,
    CharacteristicKind,
    DoorState,
    Home,
    Room,
    Service,
)
from homemcp.directory.provider import Completion, DeviceDirectory, DirectoryError

__all__ = [
    "Accessory",
    "BridgeOutcome",
    "BridgeStatus",
    "Characteristic",
    "CharacteristicKind",
    "Completion",
    "DeviceDirectory",
    "DirectoryError",
    "DoorState",
    "Home",
    "InMemoryDirectory",
    "Room",
    "Service",
    "load_fixture",
    "run_bridged",
]
