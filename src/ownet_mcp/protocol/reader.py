"""Receive side of a single owserver exchange.

After a request is sent the server may answer with any number of
keep-alive headers (``payload_size == -1``) before the real reply.
:class:`ResponseReader` pulls headers until it gets a final one, then
reads the payload if the command returns data.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..errors import ProtocolError, ResponseTimeout, TransportError
from ..transport.base import Transport
from .flags import FlagMask
from .framing import HEADER_SIZE, IncomingHeader, decode_incoming

logger = logging.getLogger(__name__)

DEFAULT_KEEPALIVE_TIMEOUT = 30.0


@dataclass(frozen=True)
class Reply:
    """A complete, successful reply."""

    header: IncomingHeader
    payload: bytes = b""

    @property
    def persistence(self) -> bool:
        return FlagMask(self.header.flags).has_persistence()


class ResponseReader:
    """Reads one reply from a transport.

    Args:
        keepalive_timeout: Seconds to keep accepting keep-alive headers
            before raising :class:`ResponseTimeout`. ``None`` waits
            forever.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        keepalive_timeout: float | None = DEFAULT_KEEPALIVE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if keepalive_timeout is not None and keepalive_timeout < 0:
            raise ValueError(
                f"keepalive_timeout must be >= 0, got {keepalive_timeout}"
            )
        self._keepalive_timeout = keepalive_timeout
        self._clock = clock

    @property
    def keepalive_timeout(self) -> float | None:
        return self._keepalive_timeout

    def read(self, transport: Transport, expect_payload: bool) -> Reply:
        """Read headers until a final one arrives, then the payload.

        Raises:
            TransportError: If the transport fails at any recv.
            MalformedHeader: If a header cannot be decoded.
            ProtocolError: If the server reports a negative ``ret``.
            ResponseTimeout: If keep-alives outlast the deadline.
        """
        deadline = None
        if self._keepalive_timeout is not None:
            deadline = self._clock() + self._keepalive_timeout

        while True:
            header = decode_incoming(_recv(transport, HEADER_SIZE))
            logger.debug("<- %s", header)

            # an error header is final whatever its payload_size says
            if header.ret < 0:
                raise ProtocolError(
                    -header.ret, FlagMask(header.flags).has_persistence()
                )

            if not header.is_keepalive:
                break

            logger.debug("Keep-alive from server, waiting")
            if deadline is not None and self._clock() > deadline:
                raise ResponseTimeout(self._keepalive_timeout)

        if not expect_payload or header.payload_size <= 0:
            return Reply(header)

        payload = _recv(transport, header.payload_size)
        if 0 <= header.size < header.payload_size:
            payload = payload[: header.size]
        return Reply(header, payload)


def _recv(transport: Transport, size: int) -> bytes:
    try:
        return transport.recv(size)
    except TransportError:
        raise
    except OSError as e:
        raise TransportError(e) from e
