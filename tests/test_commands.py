"""Tests for command codes and request builders."""

import pytest

from ownet_mcp.protocol.commands import (
    Command,
    build_command,
    build_dir,
    build_ping,
    build_present,
    build_read,
    build_write,
    encode_path,
    expects_payload,
)
from ownet_mcp.protocol.framing import decode_outgoing


def test_command_enum_values():
    """Message type codes are fixed by the protocol."""
    assert Command.PING == 1
    assert Command.READ == 2
    assert Command.WRITE == 3
    assert Command.PRESENT == 6
    assert Command.DIRALLSLASH == 9
    assert Command.GETSLASH == 10


def test_expects_payload():
    assert expects_payload(Command.READ)
    assert expects_payload(Command.DIRALLSLASH)
    assert not expects_payload(Command.PING)
    assert not expects_payload(Command.PRESENT)
    assert not expects_payload(Command.WRITE)


def test_encode_path():
    assert encode_path("/") == b"/\x00"
    assert encode_path("/température") == "/température".encode("utf-8") + b"\x00"


def test_build_ping():
    header, payload = decode_outgoing(build_ping(flags=0x104))
    assert header.command_type == Command.PING
    assert header.version == 0
    assert header.flags == 0x104
    assert payload == b""


def test_build_present():
    header, payload = decode_outgoing(build_present("/28.32D7E0080000"))
    assert header.command_type == Command.PRESENT
    assert payload == b"/28.32D7E0080000\x00"


def test_build_dir():
    header, payload = decode_outgoing(build_dir("/"))
    assert header.command_type == Command.DIRALLSLASH
    assert header.payload_size == 2
    assert payload == b"/\x00"


def test_build_read():
    header, payload = decode_outgoing(
        build_read("/28.32D7E0080000/temperature", size=8192, offset=0)
    )
    assert header.command_type == Command.READ
    assert header.requested_size == 8192
    assert payload == b"/28.32D7E0080000/temperature\x00"


def test_build_read_default_size():
    header, _ = decode_outgoing(build_read("/x"))
    assert header.requested_size == 0
    assert header.offset == 0


def test_build_read_bounds():
    with pytest.raises(ValueError):
        build_read("/x", size=-1)
    with pytest.raises(ValueError):
        build_read("/x", offset=-1)


def test_build_write():
    """Path, NUL, then the raw value without a trailing NUL."""
    header, payload = decode_outgoing(build_write("/42.C2D154000000/PIO.A", b"1"))
    assert header.command_type == Command.WRITE
    assert header.requested_size == 1
    assert header.payload_size == len(payload)
    assert payload == b"/42.C2D154000000/PIO.A\x001"


def test_build_write_offset():
    header, _ = decode_outgoing(build_write("/x/memory", b"abcd", offset=16))
    assert header.offset == 16
    with pytest.raises(ValueError):
        build_write("/x", b"", offset=-1)


def test_build_command_generic():
    header, payload = decode_outgoing(build_command(Command.SIZE, b"/x\x00"))
    assert header.command_type == Command.SIZE == 5
    assert payload == b"/x\x00"
