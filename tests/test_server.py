"""Tests for the MCP tool layer with a mocked connection."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from ownet_mcp.protocol.flags import Flag
from ownet_mcp.protocol.framing import IncomingHeader, decode_outgoing


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("ownet_mcp.server", None)
        import ownet_mcp.server as server_mod

    return server_mod


def _install_connection(server, *replies) -> MagicMock:
    """Make every new TCPConnection the same scripted mock."""
    conn = MagicMock()
    conn.connected = True
    conn.recv.side_effect = list(replies)
    server.TCPConnection = MagicMock(return_value=conn)
    return conn


def test_list_dir_returns_paths():
    server = _get_server_module()
    conn = _install_connection(
        server,
        IncomingHeader(payload_size=18, size=17, flags=Flag.PERSISTENCE).encode(),
        b"/43.E6ABD6010000/\x00",
    )

    result = server.list_dir("/")

    assert result == {"paths": ["/43.E6ABD6010000/"], "persistence": True}
    conn.open.assert_called_once()
    conn.close.assert_not_called()


def test_non_persistent_reply_drops_connection():
    server = _get_server_module()
    conn = _install_connection(
        server,
        IncomingHeader(payload_size=5, ret=5, size=5).encode(),
        b"21.25",
    )

    result = server.read("/28.32D7E0080000/temperature")

    assert result["value"] == "21.25"
    assert result["persistence"] is False
    conn.close.assert_called_once()
    assert server._connection is None


def test_persistent_connection_reused():
    server = _get_server_module()
    persist = IncomingHeader(flags=Flag.PERSISTENCE).encode()
    _install_connection(server, persist, persist)

    server.ping()
    server.ping()

    server.TCPConnection.assert_called_once()


def test_write_sends_value():
    server = _get_server_module()
    conn = _install_connection(server, IncomingHeader().encode())

    result = server.write("/42.C2D154000000/PIO.A", "1")

    assert result["written"] is True
    _, payload = decode_outgoing(conn.send.call_args.args[0])
    assert payload == b"/42.C2D154000000/PIO.A\x001"


def test_protocol_error_becomes_error_dict():
    server = _get_server_module()
    _install_connection(server, IncomingHeader(ret=-2).encode())

    result = server.read("/nope")

    assert result["code"] == 2
    assert "error" in result


def test_present_false_on_error():
    server = _get_server_module()
    _install_connection(server, IncomingHeader(ret=-2).encode())
    assert server.present("/nope") == {"present": False, "persistence": False}


def test_transport_error_becomes_error_dict():
    server = _get_server_module()
    from ownet_mcp.errors import TransportError

    server.TCPConnection = MagicMock()
    server.TCPConnection.return_value.open.side_effect = TransportError("refused")

    result = server.ping()

    assert "error" in result
    assert server._connection is None


def test_connect_reports_status():
    server = _get_server_module()
    _install_connection(server, IncomingHeader(flags=Flag.PERSISTENCE).encode())

    result = server.connect("owserver.local", 4305)

    assert result == {
        "connected": True,
        "host": "owserver.local",
        "port": 4305,
        "persistence": True,
    }
    server.TCPConnection.assert_called_once_with("owserver.local", 4305, 5.0)


def test_connect_rejects_bad_port():
    server = _get_server_module()
    result = server.connect(port=0)
    assert "error" in result


def test_read_rejects_negative_size():
    server = _get_server_module()
    assert "error" in server.read("/x", size=-1)


def test_disconnect_and_status_resource():
    server = _get_server_module()
    _install_connection(server, IncomingHeader(flags=Flag.PERSISTENCE).encode())
    server.ping()

    status = json.loads(server.resource_connection_status())
    assert status["connected"] is True

    assert server.disconnect() == {"disconnected": True}
    status = json.loads(server.resource_connection_status())
    assert status["connected"] is False
    assert status["port"] == 4304
