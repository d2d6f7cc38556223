"""HTTPMCPServer — asyncio listener, connection tracking, and HTTP routing.

Every connection carries exactly one request and is closed after the
response, except ``GET /events`` which stays open as an event stream.
All callbacks run on one event loop. JSON-RPC dispatch is additionally
serialised by a lock, so a request waiting on a slow directory operation
holds back the ones behind it.

Routes::

    GET  /              welcome page
    GET  /events        Server-Sent-Events stream
    GET  /mcp           discovery document
    POST /mcp           JSON-RPC envelope
    POST /mcp/initialize, /mcp/tools/list, /mcp/tools/call
                        JSON-RPC envelope (the envelope's method decides)
"""

from __future__ import annotations

import asyncio
import html
import logging
from typing import TYPE_CHECKING, Any

from homemcp.protocols.errors import BadRequestError
from homemcp.protocols.mcp.catalog import TOOL_NAMES, TOOLS
from homemcp.protocols.mcp.dispatcher import MCPDispatcher
from homemcp.tools.handlers import HomeTools
from homemcp.transport.http import (
    HttpRequest,
    error_response,
    html_response,
    json_response,
    parse_request,
    request_complete,
)
from homemcp.transport.sse import SSEPublisher
from homemcp.utils.telemetry import ATTR_HTTP_METHOD, ATTR_HTTP_PATH, get_tracer

if TYPE_CHECKING:
    from homemcp.config import ServerConfig
    from homemcp.directory.provider import DeviceDirectory

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

READ_CHUNK_SIZE = 65536

JSONRPC_PATHS = frozenset({"/mcp", "/mcp/initialize", "/mcp/tools/list", "/mcp/tools/call"})


class HTTPMCPServer:
    """Serves MCP over hand-framed HTTP on a single port.

    Usage::

        async with HTTPMCPServer(dispatcher, config) as server:
            await server.serve_forever()
    """

    def __init__(
        self,
        dispatcher: MCPDispatcher,
        config: ServerConfig,
        *,
        publisher: SSEPublisher | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._config = config
        self._publisher = publisher or SSEPublisher()
        self._connections: set[asyncio.StreamWriter] = set()
        self._dispatch_lock = asyncio.Lock()
        self._server: asyncio.Server | None = None

    async def __aenter__(self) -> HTTPMCPServer:
        await self.start()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    @property
    def publisher(self) -> SSEPublisher:
        return self._publisher

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    @property
    def port(self) -> int:
        """The bound port; differs from the configured one when that was 0."""
        if self._server is None or not self._server.sockets:
            return self._config.port
        return int(self._server.sockets[0].getsockname()[1])

    @property
    def mcp_url(self) -> str:
        return f"http://{self._config.host}:{self.port}/mcp"

    async def start(self) -> None:
        self._server = await asyncio.start_server(
            self._handle_connection,
            self._config.host,
            self._config.port,
            reuse_address=True,
        )
        logger.info("HTTP MCP server listening at %s", self.mcp_url)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
        for writer in list(self._connections):
            await self._close(writer)
        if self._server is not None:
            await self._server.wait_closed()
            self._server = None

    # -- connections ---------------------------------------------------------

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._connections.add(writer)
        try:
            data = await self._read_request(reader)
            if data:
                await self._respond(data, reader, writer)
        except (ConnectionError, OSError) as exc:
            logger.warning("Receive error: %s", exc)
        finally:
            await self._close(writer)

    async def _read_request(self, reader: asyncio.StreamReader) -> bytes:
        buffer = bytearray()
        while True:
            chunk = await reader.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            buffer.extend(chunk)
            if request_complete(bytes(buffer)):
                break
        return bytes(buffer)

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        if writer not in self._connections:
            return
        self._connections.discard(writer)
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError):
            pass

    # -- routing -------------------------------------------------------------

    async def _respond(
        self,
        data: bytes,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        try:
            request = parse_request(data)
        except BadRequestError as exc:
            logger.info("400 for unparseable request: %s", exc)
            writer.write(error_response(400))
            await writer.drain()
            return

        logger.info("%s %s", request.method, request.path)
        with _tracer.start_as_current_span("http.request") as span:
            span.set_attribute(ATTR_HTTP_METHOD, request.method)
            span.set_attribute(ATTR_HTTP_PATH, request.path)

            if (request.method, request.path) == ("GET", "/events"):
                await self._publisher.subscribe(reader, writer, self.server_info())
                return
            response = await self._route(request)

        writer.write(response)
        await writer.drain()

    async def _route(self, request: HttpRequest) -> bytes:
        if request.method == "POST" and request.path in JSONRPC_PATHS:
            return await self._handle_jsonrpc(request)
        if (request.method, request.path) == ("GET", "/mcp"):
            return json_response(self.discovery())
        if (request.method, request.path) == ("GET", "/"):
            return html_response(welcome_html(self.mcp_url))
        logger.info("404 for %s %s", request.method, request.path)
        return error_response(404)

    async def _handle_jsonrpc(self, request: HttpRequest) -> bytes:
        if request.body is None:
            return error_response(400, "Invalid request")
        async with self._dispatch_lock:
            response = await self._dispatcher.handle_body(request.body)
        return json_response(response.to_wire())

    # -- documents -----------------------------------------------------------

    def server_info(self) -> dict[str, Any]:
        info = self._config.server_info()
        info["tools"] = list(TOOL_NAMES)
        return info

    def discovery(self) -> dict[str, Any]:
        return {
            "version": self._config.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": self._config.server_info(),
        }


def welcome_html(mcp_url: str) -> str:
    tools = "\n".join(
        f"        <li><code>{tool.name}</code> - {html.escape(tool.description)}</li>"
        for tool in TOOLS
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>HomeKit MCP Server</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        .endpoint {{ background: #f5f5f5; padding: 10px; margin: 10px 0; border-radius: 5px; }}
        code {{ background: #e8e8e8; padding: 2px 4px; border-radius: 3px; }}
    </style>
</head>
<body>
    <h1>HomeKit MCP Server</h1>
    <p>HTTP-based MCP server for HomeKit accessories and rooms</p>

    <h2>MCP Transport Endpoints:</h2>
    <div class="endpoint"><strong>GET /mcp</strong> - MCP server discovery</div>
    <div class="endpoint"><strong>POST /mcp/initialize</strong> - Initialize MCP session</div>
    <div class="endpoint"><strong>POST /mcp/tools/list</strong> - List available tools</div>
    <div class="endpoint"><strong>POST /mcp/tools/call</strong> - Execute tool</div>

    <h2>Direct Endpoints:</h2>
    <div class="endpoint"><strong>GET /events</strong> - Server-Sent Events stream</div>
    <div class="endpoint"><strong>POST /mcp</strong> - Direct MCP JSON-RPC requests</div>

    <h2>Available Tools:</h2>
    <ul>
{tools}
    </ul>

    <h2>Client Configuration:</h2>
    <pre><code>{{
  "mcpServers": {{
    "homekit": {{
      "type": "http",
      "url": "{html.escape(mcp_url)}"
    }}
  }}
}}</code></pre>
</body>
</html>
"""


def build_server(directory: DeviceDirectory, config: ServerConfig) -> HTTPMCPServer:
    """Wire tools, dispatcher, and listener for *directory*."""
    tools = HomeTools(directory, timeout=config.bridge_timeout)
    return HTTPMCPServer(MCPDispatcher(tools, config), config)


async def run_server(directory: DeviceDirectory, config: ServerConfig) -> None:
    """Serve until cancelled."""
    async with build_server(directory, config) as server:
        await server.serve_forever()
