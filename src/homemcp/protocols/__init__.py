"""Protocol layer — JSON-RPC envelopes, MCP dispatch, and error taxonomy."""

from homemcp.protocols.errors import (
    ApplicationError,
    BadRequestError,
    InvalidParamsError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolNotFoundError,
)

__all__ = [
    "ApplicationError",
    "BadRequestError",
    "InvalidParamsError",
    "MethodNotFoundError",
    "ParseError",
    "ProtocolError",
    "ToolNotFoundError",
]
