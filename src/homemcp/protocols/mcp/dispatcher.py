"""MCPDispatcher — decodes JSON-RPC envelopes and routes MCP methods.

Served methods: ``initialize``, ``tools/list`` and ``tools/call``. Every
outcome, including a body that is not JSON at all, is a
:class:`JsonRpcResponse`; callers send it with HTTP 200.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from homemcp.protocols.errors import (
    INTERNAL_ERROR,
    InvalidParamsError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
)
from homemcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse
from homemcp.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from homemcp.config import ServerConfig
    from homemcp.protocols.provider import ToolProvider

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

MethodHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


def decode_request(body: str | bytes) -> JsonRpcRequest:
    """Parse a JSON-RPC request envelope.

    Raises:
        ParseError: If *body* is not JSON or not a request object.
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ParseError(str(exc)) from exc
    if not isinstance(data, dict):
        raise ParseError("request must be a JSON object")
    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"invalid request envelope ({exc.error_count()} error(s))") from exc


class MCPDispatcher:
    """Routes decoded requests to MCP method handlers.

    Usage::

        dispatcher = MCPDispatcher(HomeTools(directory), config)
        response = await dispatcher.handle_body('{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}')
        payload = response.to_wire()
    """

    def __init__(self, provider: ToolProvider, config: ServerConfig) -> None:
        self._provider = provider
        self._config = config
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    async def handle_body(self, body: str | bytes) -> JsonRpcResponse:
        """Decode *body* and dispatch it; decode failures answer with ``id: null``."""
        try:
            request = decode_request(body)
        except ParseError as exc:
            logger.info("Rejecting undecodable request: %s", exc)
            return JsonRpcResponse.failure(None, exc.code, exc.message)
        return await self.handle(request)

    async def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Dispatch one request and wrap its result or error."""
        with _tracer.start_as_current_span(f"mcp.{request.method}") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            if request.id is not None:
                span.set_attribute(ATTR_RPC_ID, request.id)

            handler = self._methods.get(request.method)
            try:
                if handler is None:
                    raise MethodNotFoundError(request.method)
                result = await handler(request.params or {})
            except ProtocolError as exc:
                logger.info("%s (id=%s) -> %d %s", request.method, request.id, exc.code, exc.message)
                span.set_attribute(ATTR_RPC_ERROR_CODE, exc.code)
                return JsonRpcResponse.failure(request.id, exc.code, exc.message)
            except Exception as exc:
                logger.exception("Unhandled error while serving %s", request.method)
                span.set_attribute(ATTR_RPC_ERROR_CODE, INTERNAL_ERROR)
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, f"Internal error: {exc}")
            return JsonRpcResponse.success(request.id, result)

    # -- methods -------------------------------------------------------------

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client = params.get("clientInfo")
        if isinstance(client, dict):
            logger.info("Initialize from %s %s", client.get("name"), client.get("version"))
        return {
            "protocolVersion": self._config.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": self._config.server_info(),
        }

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in self._provider.tool_definitions()]}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(name, str) or not isinstance(arguments, dict):
            raise InvalidParamsError("Invalid params")

        with _tracer.start_as_current_span("mcp.tool") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            result = await self._provider.call_tool(name, arguments)
        return result.to_result()
