"""MCP server entry point for an owserver (1-Wire) daemon.

Exposes the client operations as tools via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import OwnetClient
from .config import ClientSettings
from .errors import OwnetError, ProtocolError
from .transport.tcp_connection import TCPConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "ownet",
    instructions="MCP server for browsing and controlling a 1-Wire bus through owserver",
)

# Global connection state
_settings: ClientSettings = ClientSettings()
_client: OwnetClient = OwnetClient.from_settings(_settings)
_connection: TCPConnection | None = None


def _get_connection() -> TCPConnection:
    """Return the open connection, opening a fresh one if needed."""
    global _connection
    if _connection is None or not _connection.connected:
        conn = TCPConnection(_settings.host, _settings.port, _settings.timeout)
        conn.open()
        _connection = conn
    return _connection


def _drop_connection() -> None:
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None


def _run(operation, *args) -> dict[str, Any]:
    """Run a client operation and shape the outcome as a tool result.

    The connection is kept only while the server grants persistence;
    owserver closes non-persistent sockets after each reply.
    """
    try:
        result = operation(_get_connection(), *args)
    except ProtocolError as e:
        if not e.persistence:
            _drop_connection()
        return {"error": str(e), "code": e.code}
    except OwnetError as e:
        logger.warning("owserver request failed: %s", e)
        _drop_connection()
        return {"error": str(e)}

    if not result.persistence:
        _drop_connection()
    return result.to_dict()


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Point the server at an owserver daemon and check it answers.

    Args:
        host: owserver host (default from OWNET_HOST or localhost).
        port: owserver TCP port (default 4304).
    """
    global _settings
    _drop_connection()
    candidate = replace(
        _settings,
        host=_settings.host if host is None else host,
        port=_settings.port if port is None else port,
    )
    try:
        candidate.validate()
    except ValueError as e:
        return {"error": str(e)}
    _settings = candidate

    result = _run(_client.ping)
    if "error" in result:
        return {"connected": False, **result}
    return {
        "connected": True,
        "host": _settings.host,
        "port": _settings.port,
        "persistence": result["persistence"],
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to owserver."""
    _drop_connection()
    return {"disconnected": True}


# ─── BUS TOOLS ────────────────────────────────────────────────────────

@mcp.tool()
def ping() -> dict[str, Any]:
    """Check that owserver is alive."""
    return _run(_client.ping)


@mcp.tool()
def present(path: str) -> dict[str, Any]:
    """Check whether a device or property path exists.

    Args:
        path: Path such as ``/28.32D7E0080000``.
    """
    return _run(_client.present, path)


@mcp.tool()
def list_dir(path: str = "/") -> dict[str, Any]:
    """List devices or properties under a path.

    Directory entries end with a slash.

    Args:
        path: Directory path (default root).
    """
    return _run(_client.dir, path)


@mcp.tool()
def read(path: str, size: int = 0, offset: int = 0) -> dict[str, Any]:
    """Read a property value, e.g. ``/28.32D7E0080000/temperature``.

    Args:
        path: Property path.
        size: Maximum bytes to read, 0 for the server default.
        offset: Byte offset into the value.
    """
    if size < 0 or offset < 0:
        return {"error": "size and offset must be >= 0"}
    return _run(_client.read, path, size, offset)


@mcp.tool()
def write(path: str, value: str) -> dict[str, Any]:
    """Write a value to a property, e.g. ``/42.C2D154000000/PIO.A`` = ``1``.

    Args:
        path: Property path.
        value: Value to write, sent as UTF-8.
    """
    return _run(_client.write, path, value)


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("ownet://connection/status")
def resource_connection_status() -> str:
    """Configured server address and connection state."""
    connected = _connection is not None and _connection.connected
    return json.dumps({"connected": connected, **_settings.to_dict()})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    global _settings, _client
    _settings = ClientSettings.from_env()
    _client = OwnetClient.from_settings(_settings)
    logging.basicConfig(level=_settings.log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
