"""HTTP transport — request framing, event streams, and the connection listener."""

from homemcp.transport.http import HttpRequest, parse_request
from homemcp.transport.server import HTTPMCPServer, build_server, run_server
from homemcp.transport.sse import SSEPublisher

__all__ = [
    "HTTPMCPServer",
    "HttpRequest",
    "SSEPublisher",
    "build_server",
    "parse_request",
    "run_server",
]
