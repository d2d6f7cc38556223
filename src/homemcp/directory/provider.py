"""DeviceDirectory protocol — the capability interface the gateway consumes.

Enumeration and characteristic reads are synchronous. Every mutation is
asynchronous: it returns immediately and later invokes *completion* exactly
once, with ``None`` on success or the exception that made it fail. The
completion may be invoked from any thread. Wrap mutations with
:func:`homemcp.directory.bridge.run_bridged` before exposing them to
request/response code.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from homemcp.directory.models import Accessory, CharacteristicKind, Home, Room

Completion = Callable[[Exception | None], None]


class DirectoryError(Exception):
    """A directory operation reported failure."""


@runtime_checkable
class DeviceDirectory(Protocol):
    """Source of truth for homes, rooms, and accessories."""

    def homes(self) -> Sequence[Home]:
        """Return every home in enumeration order."""
        ...

    def assign_accessory_to_room(
        self, accessory: Accessory, room: Room, completion: Completion
    ) -> None: ...

    def rename_accessory(
        self, accessory: Accessory, new_name: str, completion: Completion
    ) -> None: ...

    def rename_room(self, room: Room, new_name: str, completion: Completion) -> None: ...

    def read_characteristic(self, accessory: Accessory, kind: CharacteristicKind) -> Any:
        """Return the cached value, or ``None`` if it cannot be read."""
        ...

    def write_characteristic(
        self,
        accessory: Accessory,
        kind: CharacteristicKind,
        value: Any,
        completion: Completion,
    ) -> None: ...
