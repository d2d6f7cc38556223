"""MCP models — JSON-RPC 2.0 messages, tool definitions, and tool results.

Tool arguments and results are schema-free JSON. They are carried as
*dynamic values*: the closed set ``str | int | bool | list | dict | None``.
:func:`decode_value` and :func:`encode_value` are the only crossing points
between arbitrary Python objects and that set; anything outside it
(floats, bytes, custom objects, ...) becomes ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator, model_validator

DynamicValue = Union[str, int, bool, list["DynamicValue"], dict[str, "DynamicValue"], None]

# ---------------------------------------------------------------------------
# Dynamic values
# ---------------------------------------------------------------------------


def encode_value(value: Any) -> DynamicValue:
    """Convert a native value into its JSON-serialisable dynamic form."""
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): encode_value(item) for key, item in value.items()}
    return None


def decode_value(value: Any) -> DynamicValue:
    """Narrow a freshly ``json.loads``-ed value onto the dynamic arms."""
    if isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): decode_value(item) for key, item in value.items()}
    return None


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    A missing ``id`` marks a notification; responses still echo it as ``null``.
    """

    jsonrpc: str = "2.0"
    method: str
    id: int | None = None
    params: dict[str, Any] | None = None

    @field_validator("params", mode="before")
    @classmethod
    def _decode_params(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(key): decode_value(item) for key, item in value.items()}
        return value


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message carrying exactly one of result/error."""

    jsonrpc: str = "2.0"
    id: int | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: int | None, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: int | None, code: int, message: str) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        """Return the dict that goes on the wire; ``id`` is always present."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump()
        else:
            data["result"] = encode_value(self.result)
        return data


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextContent(BaseModel):
    """A human-readable text block inside ``result.content``."""

    type: str = "text"
    text: str


class ToolResult(BaseModel):
    """The result of a ``tools/call``: prose for people, ``meta`` for programs."""

    content: list[TextContent] = []
    meta: dict[str, Any] | None = None

    @classmethod
    def from_text(cls, text: str, meta: dict[str, Any] | None = None) -> ToolResult:
        """Create a ToolResult with a single text content part."""
        return cls(content=[TextContent(text=text)], meta=meta)

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.content)

    def to_result(self) -> dict[str, Any]:
        """Shape the ``result`` member of the JSON-RPC response."""
        result: dict[str, Any] = {"content": [part.model_dump() for part in self.content]}
        if self.meta is not None:
            result["_meta"] = self.meta
        return result
