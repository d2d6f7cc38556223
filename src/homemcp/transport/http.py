"""Minimal HTTP/1.1 framing — one request per connection.

Parsing is line-oriented on CRLF. The request line is
``METHOD PATH [VERSION]``; header lines are read only to find the blank
line that ends them and an optional ``Content-Length``. The body is
everything after the first blank line, rejoined with CRLF.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from homemcp.protocols.errors import BadRequestError

CRLF = "\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"

REASONS = {
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
}


@dataclass(frozen=True)
class HttpRequest:
    method: str
    path: str
    version: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def parse_request_line(text: str) -> tuple[str, str, str | None]:
    """Split the first line of *text* into method, path and version.

    The version may be absent; the path must be in origin form (``/...``).

    Raises:
        BadRequestError: If the line has fewer than two tokens or no path.
    """
    request_line = text.split(CRLF, 1)[0]
    parts = request_line.split(" ")
    if len(parts) < 2 or not parts[0] or not parts[1].startswith("/"):
        raise BadRequestError(f"malformed request line {request_line!r}")
    version = parts[2] if len(parts) > 2 and parts[2] else None
    return parts[0], parts[1], version


def extract_body(text: str) -> str | None:
    """Return everything after the first blank line, or ``None`` if there is none."""
    lines = text.split(CRLF)
    try:
        blank = lines.index("")
    except ValueError:
        return None
    if blank + 1 >= len(lines):
        return None
    return CRLF.join(lines[blank + 1 :])


def _parse_headers(text: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in text.split(CRLF)[1:]:
        if not line:
            break
        name, sep, value = line.partition(":")
        if sep:
            headers[name.strip().lower()] = value.strip()
    return headers


def parse_request(data: bytes) -> HttpRequest:
    """Frame raw bytes as an :class:`HttpRequest`.

    Raises:
        BadRequestError: If *data* is not UTF-8 or the request line is malformed.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadRequestError("request is not valid UTF-8") from exc

    method, path, version = parse_request_line(text)
    return HttpRequest(
        method=method,
        path=path,
        version=version,
        headers=_parse_headers(text),
        body=extract_body(text),
    )


def request_complete(data: bytes) -> bool:
    """Whether *data* holds a whole request.

    True once the header block is terminated and, if ``Content-Length`` is
    declared, that many body bytes have arrived.
    """
    head, sep, rest = data.partition(HEADER_TERMINATOR)
    if not sep:
        return False
    for line in head.split(b"\r\n")[1:]:
        name, colon, value = line.partition(b":")
        if colon and name.strip().lower() == b"content-length":
            try:
                return len(rest) >= int(value.strip())
            except ValueError:
                return True
    return True


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def build_response(
    status: int,
    body: bytes | str,
    *,
    content_type: str = "application/json",
    reason: str | None = None,
) -> bytes:
    """Serialise a complete response; ``Content-Length`` is the exact byte count."""
    payload = body.encode("utf-8") if isinstance(body, str) else body
    head = (
        f"HTTP/1.1 {status} {reason or REASONS.get(status, 'Unknown')}{CRLF}"
        f"Content-Type: {content_type}{CRLF}"
        f"Content-Length: {len(payload)}{CRLF}"
        f"Access-Control-Allow-Origin: *{CRLF}"
        f"Connection: close{CRLF}"
        f"{CRLF}"
    )
    return head.encode("utf-8") + payload


def json_response(payload: Any) -> bytes:
    return build_response(200, json.dumps(payload, ensure_ascii=False))


def html_response(html: str) -> bytes:
    return build_response(200, html, content_type="text/html; charset=utf-8")


def error_response(status: int, message: str | None = None) -> bytes:
    """Plain-text error; the reason phrase doubles as the body by default."""
    text = message or REASONS.get(status, "Error")
    return build_response(status, text, content_type="text/plain", reason=text)
