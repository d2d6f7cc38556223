"""Shared error types for the protocol layer.

Every :class:`ProtocolError` subclass carries the JSON-RPC error code it is
reported under. :class:`BadRequestError` is the exception: it belongs to
HTTP framing and never reaches JSON-RPC encoding.
"""

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ParseError(ProtocolError):
    """The JSON-RPC envelope could not be decoded."""

    code = PARSE_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Parse error" + (f": {detail}" if detail else ""))


class MethodNotFoundError(ProtocolError):
    """The JSON-RPC method is not served."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__("Method not found")


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the catalog.

    Shares the method-not-found code with :class:`MethodNotFoundError`.
    """

    code = METHOD_NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Tool not found")


class InvalidParamsError(ProtocolError):
    """A required parameter is missing or malformed."""

    code = INVALID_PARAMS


class ApplicationError(ProtocolError):
    """The request was well-formed but could not be applied to the directory."""

    code = INTERNAL_ERROR


class BadRequestError(Exception):
    """Raw bytes could not be framed as an HTTP request."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Bad Request" + (f": {detail}" if detail else ""))
