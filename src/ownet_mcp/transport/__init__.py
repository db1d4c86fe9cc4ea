"""Byte-stream transports for talking to owserver."""

from .base import Transport
from .tcp_connection import TCPConnection, DEFAULT_PORT
