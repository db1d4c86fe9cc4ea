"""Command surface of the owserver client.

The client holds no connection. Each operation borrows the transport
passed by the caller, sends one request and reads one reply::

    client = OwnetClient()
    with TCPConnection("localhost") as conn:
        listing = client.dir(conn, "/")
        value = client.read(conn, "/28.32D7E0080000/temperature")

Sharing one transport between concurrent calls is unsafe: replies carry
no request id and would interleave.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from .config import ClientSettings
from .errors import ProtocolError, TransportError
from .models.results import (
    DirResult,
    PingResult,
    PresentResult,
    ReadResult,
    WriteResult,
)
from .protocol.commands import (
    Command,
    build_dir,
    build_ping,
    build_present,
    build_read,
    build_write,
    expects_payload,
)
from .protocol.parser import parse_dir_listing
from .protocol.reader import DEFAULT_KEEPALIVE_TIMEOUT, Reply, ResponseReader
from .transport.base import Transport

logger = logging.getLogger(__name__)


class OwnetClient:
    """Issues ping, present, dir, read and write requests.

    Args:
        flags: uint32 flag word sent with every request.
        keepalive_timeout: Bound on the keep-alive wait per reply, in
            seconds; ``None`` waits forever.
        clock: Monotonic clock used for the keep-alive bound.
    """

    def __init__(
        self,
        flags: int = 0,
        keepalive_timeout: float | None = DEFAULT_KEEPALIVE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.flags = int(flags)
        self._reader = ResponseReader(keepalive_timeout, clock)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> OwnetClient:
        return cls(
            flags=settings.request_flags(),
            keepalive_timeout=settings.keepalive_timeout,
        )

    def ping(self, transport: Transport) -> PingResult:
        """Check that the server answers.

        Raises:
            TransportError, ProtocolError, ResponseTimeout
        """
        reply = self._exchange(transport, Command.PING, build_ping(self.flags))
        return PingResult(persistence=reply.persistence)

    def present(self, transport: Transport, path: str) -> PresentResult:
        """Check whether ``path`` exists. A server error means "not present"."""
        request = build_present(path, self.flags)
        try:
            reply = self._exchange(transport, Command.PRESENT, request)
        except ProtocolError as e:
            logger.debug("%s not present (error %d)", path, e.code)
            return PresentResult(present=False, persistence=e.persistence)
        return PresentResult(present=True, persistence=reply.persistence)

    def dir(self, transport: Transport, path: str) -> DirResult:
        """List the entries under ``path``, each with a trailing slash for
        directories.

        Raises:
            ProtocolError: If the server rejects the path.
            MalformedPayload: If the listing is not valid UTF-8.
        """
        request = build_dir(path, self.flags)
        reply = self._exchange(transport, Command.DIRALLSLASH, request)
        return DirResult(
            paths=parse_dir_listing(reply.payload),
            persistence=reply.persistence,
        )

    def read(
        self,
        transport: Transport,
        path: str,
        size: int = 0,
        offset: int = 0,
    ) -> ReadResult:
        """Read the raw value at ``path``. The bytes are not trimmed.

        Args:
            transport: Connected transport.
            path: Property path.
            size: Maximum bytes wanted back, 0 for the server default.
            offset: Byte offset into the value.
        """
        request = build_read(path, self.flags, size, offset)
        reply = self._exchange(transport, Command.READ, request)
        return ReadResult(value=reply.payload, persistence=reply.persistence)

    def write(
        self,
        transport: Transport,
        path: str,
        value: bytes | str,
        offset: int = 0,
    ) -> WriteResult:
        """Write ``value`` to ``path``. ``str`` values are sent as UTF-8."""
        if isinstance(value, str):
            value = value.encode("utf-8")
        request = build_write(path, value, self.flags, offset)
        reply = self._exchange(transport, Command.WRITE, request)
        return WriteResult(persistence=reply.persistence)

    def _exchange(self, transport: Transport, command: Command, request: bytes) -> Reply:
        logger.debug("-> %s (%d bytes)", command.name, len(request))
        try:
            transport.send(request)
        except TransportError:
            raise
        except OSError as e:
            raise TransportError(e) from e
        return self._reader.read(transport, expects_payload(command))
