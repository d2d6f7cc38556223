"""ToolProvider protocol — what the MCP dispatcher needs from a tool backend.

The dispatcher routes ``tools/list`` and ``tools/call`` through this
interface so it never depends on the device directory directly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from homemcp.protocols.mcp.models import MCPToolDef, ToolResult


@runtime_checkable
class ToolProvider(Protocol):
    """Describes and executes a fixed set of tools."""

    def tool_definitions(self) -> Sequence[MCPToolDef]:
        """Return the descriptors served by ``tools/list``."""
        ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a tool by name.

        Raises :class:`~homemcp.protocols.errors.ToolNotFoundError` for
        unknown names and other ``ProtocolError`` subclasses for bad
        arguments or unresolvable targets.
        """
        ...
