"""MCP protocol — JSON-RPC envelopes, the tool catalog, and the method dispatcher."""

from homemcp.protocols.mcp.catalog import TOOL_NAMES, TOOLS
from homemcp.protocols.mcp.dispatcher import MCPDispatcher, decode_request
from homemcp.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
    TextContent,
    ToolResult,
    decode_value,
    encode_value,
)

__all__ = [
    "TOOLS",
    "TOOL_NAMES",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPDispatcher",
    "MCPToolDef",
    "TextContent",
    "ToolResult",
    "decode_request",
    "decode_value",
    "encode_value",
]
