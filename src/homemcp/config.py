"""Server configuration — listener address, identity, and bridge timeout."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


class ConfigError(Exception):
    """Raised when a configuration or fixture file cannot be loaded."""


class ServerConfig(BaseModel):
    """Settings for one gateway process.

    Example YAML::

        host: 0.0.0.0
        port: 8080
        bridge_timeout: 5
        directory_fixture: ${HOME}/homes.yaml
    """

    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    bridge_timeout: float = Field(default=5.0, gt=0)
    server_name: str = "homekit-mcp-server"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    directory_fixture: Path | None = None

    def server_info(self) -> dict[str, Any]:
        return {"name": self.server_name, "version": self.server_version}

    @property
    def mcp_url(self) -> str:
        return f"http://{self.host}:{self.port}/mcp"


def read_yaml(path: Path) -> Any:
    """Read *path*, expand ``${VAR}`` references, and parse it as YAML.

    Raises:
        ConfigError: On I/O or YAML parse errors.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    try:
        return yaml.safe_load(os.path.expandvars(raw))
    except yaml.YAMLError as exc:
        raise ConfigError(f"YAML parse error in {path}: {exc}") from exc


def load_config(path: str | Path) -> ServerConfig:
    """Load and validate a :class:`ServerConfig` from a YAML file.

    An empty file yields the defaults.
    """
    p = Path(path)
    data = read_yaml(p)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p} must contain a mapping")

    try:
        config = ServerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    fixture = config.directory_fixture
    if fixture is not None and not fixture.is_absolute():
        config = config.model_copy(update={"directory_fixture": p.parent / fixture})
    return config
