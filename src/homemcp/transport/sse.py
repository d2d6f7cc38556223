"""SSEPublisher — long-lived Server-Sent-Events streams.

A subscriber receives the stream headers once, then a ``server-info``
event. Later events go out through :meth:`SSEPublisher.publish`; nothing
in the gateway schedules them yet. A stream stays open until the peer
closes it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

SSE_HEADERS = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/event-stream\r\n"
    b"Cache-Control: no-cache\r\n"
    b"Connection: keep-alive\r\n"
    b"Access-Control-Allow-Origin: *\r\n"
    b"\r\n"
)


def format_event(event: str, data: Any) -> bytes:
    """Encode one ``event:``/``data:`` block."""
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n".encode("utf-8")


class SSEPublisher:
    """Tracks open event streams and writes named events to them."""

    def __init__(self) -> None:
        self._streams: set[asyncio.StreamWriter] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._streams)

    async def subscribe(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        server_info: dict[str, Any],
    ) -> None:
        """Serve one stream until the peer disconnects."""
        try:
            writer.write(SSE_HEADERS)
            writer.write(format_event("server-info", server_info))
            await writer.drain()
        except (ConnectionError, OSError) as exc:
            logger.warning("Failed to open event stream: %s", exc)
            return

        self._streams.add(writer)
        logger.info("Event stream opened (%d open)", len(self._streams))
        try:
            # Inbound bytes are ignored; EOF means the subscriber left.
            while await reader.read(1024):
                pass
        except (ConnectionError, OSError) as exc:
            logger.info("Event stream dropped: %s", exc)
        finally:
            self._streams.discard(writer)
            logger.info("Event stream closed (%d open)", len(self._streams))

    async def publish(self, event: str, data: Any) -> int:
        """Send *event* to every open stream; returns how many received it."""
        message = format_event(event, data)
        delivered = 0
        for writer in list(self._streams):
            try:
                writer.write(message)
                await writer.drain()
            except (ConnectionError, OSError) as exc:
                logger.info("Dropping event stream: %s", exc)
                self._streams.discard(writer)
                continue
            delivered += 1
        return delivered
