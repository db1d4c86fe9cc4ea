"""Client for the owserver (OWNET) protocol, with an MCP tool server."""

from .client import OwnetClient
from .errors import (
    OwnetError,
    TransportError,
    MalformedHeader,
    MalformedPayload,
    ProtocolError,
    ResponseTimeout,
)
from .transport import TCPConnection
