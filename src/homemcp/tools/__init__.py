"""Home tools — the twelve MCP tools and the accessory resolver behind them."""

from homemcp.tools.handlers import HomeTools
from homemcp.tools.resolver import ControlAction, ControlKind, PendingControl, resolve_control

__all__ = [
    "ControlAction",
    "ControlKind",
    "HomeTools",
    "PendingControl",
    "resolve_control",
]
