"""TCP connection to an owserver daemon.

owserver listens on port 4304 by default. Without the persistence flag
the server closes the socket after each reply, so a caller that does
not get persistence granted needs a fresh connection per request.
"""

from __future__ import annotations

import logging
import socket

from ..errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 4304
DEFAULT_TIMEOUT = 5.0


class TCPConnection:
    """Blocking TCP stream implementing the client's transport contract.

    Usage::

        with TCPConnection("localhost") as conn:
            client.dir(conn, "/")
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: socket.socket | None = None

    @classmethod
    def from_socket(cls, sock: socket.socket) -> TCPConnection:
        """Wrap an already-connected socket."""
        conn = cls(timeout=sock.gettimeout())
        try:
            conn._host, conn._port = sock.getpeername()[:2]
        except (OSError, TypeError, ValueError):
            pass
        conn._sock = sock
        return conn

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> tuple[str, int]:
        return self._host, self._port

    def open(self) -> None:
        """Connect to the server.

        Raises:
            TransportError: If the connection cannot be established.
        """
        if self._sock is not None:
            return
        try:
            self._sock = socket.create_connection(
                (self._host, self._port), timeout=self._timeout
            )
        except OSError as e:
            raise TransportError(e) from e
        logger.info("Connected to owserver at %s:%d", self._host, self._port)

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def __enter__(self) -> TCPConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def send(self, data: bytes) -> None:
        sock = self._require_socket()
        try:
            sock.sendall(data)
        except OSError as e:
            raise TransportError(e) from e

    def recv(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Raises:
            TransportError: On socket error, timeout, or if the peer
                closes the stream before ``size`` bytes arrive.
        """
        sock = self._require_socket()
        buf = bytearray()
        while len(buf) < size:
            try:
                chunk = sock.recv(size - len(buf))
            except OSError as e:
                raise TransportError(e) from e
            if not chunk:
                raise TransportError(
                    f"connection closed after {len(buf)} of {size} bytes"
                )
            buf.extend(chunk)
        return bytes(buf)

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("not connected")
        return self._sock
