"""HomeMCP — Model Context Protocol gateway for a home-automation device graph."""

from __future__ import annotations

__version__ = "0.1.0"
