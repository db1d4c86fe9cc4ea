"""Message type constants and request builders.

Each request is a header plus a payload whose shape depends on the
command: a NUL-terminated path, optionally followed by the raw value
for writes.
"""

from __future__ import annotations

from enum import IntEnum

from .framing import encode_outgoing


class Command(IntEnum):
    """owserver message types. The numbers are fixed by the protocol."""

    ERROR = 0
    PING = 1  # NOP
    READ = 2
    WRITE = 3
    DIR = 4
    SIZE = 5
    PRESENT = 6
    DIRALL = 7
    GET = 8
    DIRALLSLASH = 9
    GETSLASH = 10


# Commands whose successful reply carries a payload
PAYLOAD_COMMANDS = frozenset({
    Command.READ,
    Command.DIR,
    Command.DIRALL,
    Command.GET,
    Command.DIRALLSLASH,
    Command.GETSLASH,
})


def expects_payload(command: Command) -> bool:
    return command in PAYLOAD_COMMANDS


def encode_path(path: str) -> bytes:
    """UTF-8 path with a single trailing NUL."""
    return path.encode("utf-8") + b"\x00"


def build_command(
    command: Command,
    payload: bytes = b"",
    flags: int = 0,
    size: int = 0,
    offset: int = 0,
) -> bytes:
    """Build the wire bytes for a single request."""
    return encode_outgoing(command, payload, flags, size, offset)


def build_ping(flags: int = 0) -> bytes:
    """Build a NOP request used as a liveness check."""
    return build_command(Command.PING, flags=flags)


def build_present(path: str, flags: int = 0) -> bytes:
    return build_command(Command.PRESENT, encode_path(path), flags)


def build_dir(path: str, flags: int = 0) -> bytes:
    """Build a DIRALLSLASH request listing the children of ``path``."""
    return build_command(Command.DIRALLSLASH, encode_path(path), flags)


def build_read(path: str, flags: int = 0, size: int = 0, offset: int = 0) -> bytes:
    """Build a READ request.

    Args:
        path: Property path, e.g. ``/28.32D7E0080000/temperature``.
        flags: uint32 option mask.
        size: Maximum bytes to read back, 0 for the server default.
        offset: Byte offset into the value.
    """
    if size < 0:
        raise ValueError(f"Read size must be >= 0, got {size}")
    if offset < 0:
        raise ValueError(f"Read offset must be >= 0, got {offset}")
    return build_command(Command.READ, encode_path(path), flags, size, offset)


def build_write(path: str, value: bytes, flags: int = 0, offset: int = 0) -> bytes:
    """Build a WRITE request.

    The payload is the NUL-terminated path followed by the raw value
    (no trailing NUL); ``size`` carries the value length.
    """
    if offset < 0:
        raise ValueError(f"Write offset must be >= 0, got {offset}")
    payload = encode_path(path) + value
    return build_command(Command.WRITE, payload, flags, len(value), offset)
