"""Header encoder and decoder for owserver messages.

Header layout (24 bytes, big-endian)::

    +---------+--------------+------------+---------+---------+---------+
    | version | payload_size | type / ret |  flags  |  size   | offset  |
    |  int32  |    int32     |   int32    | uint32  |  int32  |  int32  |
    +---------+--------------+------------+---------+---------+---------+

- version: always 0 for client requests
- payload_size: length of the payload that follows; -1 on a response
  means "still working, another header follows"
- type / ret: command code on requests, return value on responses
- flags: option bits, see :mod:`.flags`
- size: requested length (request) or available data length (response)
- offset: byte offset for partial reads and writes

The payload, when present, follows the header immediately.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from ..errors import MalformedHeader

HEADER_FORMAT = ">iiiIii"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 24
KEEPALIVE_PAYLOAD_SIZE = -1


@dataclass(frozen=True)
class OutgoingHeader:
    """A request header as sent to owserver."""

    payload_size: int
    command_type: int
    flags: int = 0
    requested_size: int = 0
    offset: int = 0
    version: int = 0

    def encode(self) -> bytes:
        return _pack(
            self.version,
            self.payload_size,
            self.command_type,
            self.flags,
            self.requested_size,
            self.offset,
        )


@dataclass(frozen=True)
class IncomingHeader:
    """A response header received from owserver."""

    version: int = 0
    payload_size: int = 0
    ret: int = 0
    flags: int = 0
    size: int = 0
    offset: int = 0

    @property
    def is_keepalive(self) -> bool:
        return self.payload_size == KEEPALIVE_PAYLOAD_SIZE

    def encode(self) -> bytes:
        return _pack(
            self.version,
            self.payload_size,
            self.ret,
            self.flags,
            self.size,
            self.offset,
        )


def _pack(*fields: int) -> bytes:
    try:
        return struct.pack(HEADER_FORMAT, *fields)
    except struct.error as e:
        raise ValueError(f"Header field out of 32-bit range: {fields}") from e


def encode_outgoing(
    command: int,
    payload: bytes = b"",
    flags: int = 0,
    requested_size: int = 0,
    offset: int = 0,
) -> bytes:
    """Build a complete request: 24-byte header followed by ``payload``.

    Args:
        command: Message type code (see :class:`.commands.Command`).
        payload: Raw payload bytes, appended verbatim.
        flags: uint32 option mask.
        requested_size: Maximum bytes wanted back, 0 for server default.
        offset: Byte offset into the value.
    """
    header = OutgoingHeader(
        payload_size=len(payload),
        command_type=int(command),
        flags=int(flags),
        requested_size=requested_size,
        offset=offset,
    )
    return header.encode() + payload


def decode_outgoing(data: bytes) -> tuple[OutgoingHeader, bytes]:
    """Parse a request as it appears on the wire.

    Raises:
        MalformedHeader: If the buffer is shorter than a header or the
            trailing payload does not match ``payload_size``.
    """
    if len(data) < HEADER_SIZE:
        raise MalformedHeader(
            f"Request must be at least {HEADER_SIZE} bytes, got {len(data)}"
        )
    version, payload_size, command_type, flags, size, offset = struct.unpack(
        HEADER_FORMAT, data[:HEADER_SIZE]
    )
    payload = data[HEADER_SIZE:]
    if payload_size != len(payload):
        raise MalformedHeader(
            f"payload_size {payload_size} does not match {len(payload)} "
            f"trailing bytes"
        )
    header = OutgoingHeader(
        payload_size=payload_size,
        command_type=command_type,
        flags=flags,
        requested_size=size,
        offset=offset,
        version=version,
    )
    return header, payload


def decode_incoming(data: bytes) -> IncomingHeader:
    """Parse a 24-byte response header.

    Raises:
        MalformedHeader: If ``data`` is not exactly 24 bytes long.
    """
    if len(data) != HEADER_SIZE:
        raise MalformedHeader(
            f"Header must be {HEADER_SIZE} bytes, got {len(data)}"
        )
    version, payload_size, ret, flags, size, offset = struct.unpack(
        HEADER_FORMAT, data
    )
    return IncomingHeader(
        version=version,
        payload_size=payload_size,
        ret=ret,
        flags=flags,
        size=size,
        offset=offset,
    )
