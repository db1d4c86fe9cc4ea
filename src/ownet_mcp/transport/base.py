from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    """Connected byte stream used by the client.

    ``recv`` returns exactly ``size`` bytes or raises; short reads are
    the transport's job to hide. Failures are raised as
    ``TransportError`` (or ``OSError``, which the client wraps).
    """

    def send(self, data: bytes) -> None:
        ...

    def recv(self, size: int) -> bytes:
        ...


__all__ = ["Transport"]
