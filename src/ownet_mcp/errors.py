"""Exception hierarchy for the owserver client.

Every failure an operation can report is an ``OwnetError`` subclass, so
callers can catch the whole family or a single outcome.
"""

from __future__ import annotations

import os


class OwnetError(Exception):
    """Base class for all client errors."""


class TransportError(OwnetError):
    """The underlying byte stream failed (send, recv, or connect).

    Attributes:
        cause: The original ``OSError`` or a short reason string.
    """

    def __init__(self, cause: BaseException | str) -> None:
        self.cause = cause
        super().__init__(f"Transport failure: {cause}")


class MalformedHeader(OwnetError):
    """A header buffer had the wrong length or layout."""


class MalformedPayload(OwnetError):
    """A payload could not be decoded (e.g. invalid UTF-8)."""


class ProtocolError(OwnetError):
    """The server answered with a negative ``ret`` value.

    owserver reports failures as ``-errno``; ``code`` holds the
    magnitude. ``persistence`` is decoded from the same header because
    callers that keep connections open need it even on failure.
    """

    def __init__(self, code: int, persistence: bool = False) -> None:
        self.code = code
        self.persistence = persistence
        try:
            reason = os.strerror(code)
        except (ValueError, OverflowError):
            reason = "unknown error"
        super().__init__(f"owserver error {code}: {reason}")


class ResponseTimeout(OwnetError, TimeoutError):
    """The server kept sending keep-alive headers past the deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"No response from owserver within {timeout:g}s")
