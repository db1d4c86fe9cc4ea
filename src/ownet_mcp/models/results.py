"""Result types returned by the client operations.

Every result carries ``persistence``: whether the server agreed to keep
the connection open after this reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PingResult:
    persistence: bool = False

    def to_dict(self) -> dict:
        return {"alive": True, "persistence": self.persistence}


@dataclass(frozen=True)
class PresentResult:
    present: bool
    persistence: bool = False

    def to_dict(self) -> dict:
        return {"present": self.present, "persistence": self.persistence}


@dataclass(frozen=True)
class DirResult:
    """Directory listing in server order, duplicates preserved."""

    paths: list[str] = field(default_factory=list)
    persistence: bool = False

    def __iter__(self):
        return iter(self.paths)

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __len__(self) -> int:
        return len(self.paths)

    def to_dict(self) -> dict:
        return {"paths": list(self.paths), "persistence": self.persistence}


@dataclass(frozen=True)
class ReadResult:
    """Raw value bytes, exactly as sent by the server."""

    value: bytes = b""
    persistence: bool = False

    def text(self, errors: str = "replace") -> str:
        return self.value.decode("utf-8", errors=errors)

    def to_dict(self) -> dict:
        d = {
            "value": self.text(),
            "length": len(self.value),
            "persistence": self.persistence,
        }
        try:
            self.value.decode("utf-8")
        except UnicodeDecodeError:
            # lossy text, keep the exact bytes too
            d["hex"] = self.value.hex()
        return d


@dataclass(frozen=True)
class WriteResult:
    persistence: bool = False

    def to_dict(self) -> dict:
        return {"written": True, "persistence": self.persistence}
