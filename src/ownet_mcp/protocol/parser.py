"""Payload parsing for owserver replies."""

from __future__ import annotations

from ..errors import MalformedPayload


def decode_text(payload: bytes) -> str:
    """Decode a payload as UTF-8, raising MalformedPayload on failure."""
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedPayload(f"Payload is not valid UTF-8: {e}") from e


def parse_dir_listing(payload: bytes) -> list[str]:
    """Split a directory reply into its paths, in server order.

    Entries are NUL-terminated; owserver also joins the entries of a
    DIRALLSLASH reply with commas inside one segment, so both act as
    separators. The single empty segment left by a trailing NUL is
    dropped, any other empty segment is kept. Duplicates are kept.

    Raises:
        MalformedPayload: If the payload is not valid UTF-8.
    """
    text = decode_text(payload)
    if not text:
        return []

    segments = text.split("\x00")
    if segments[-1] == "":
        segments.pop()

    paths: list[str] = []
    for segment in segments:
        paths.extend(segment.split(","))
    return paths
