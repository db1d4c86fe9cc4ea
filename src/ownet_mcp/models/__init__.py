"""Data models for client results."""

from .results import (
    PingResult,
    PresentResult,
    DirResult,
    ReadResult,
    WriteResult,
)
