"""Data models for the button block index."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

BUTTON_PREFIX = "button-"

# Parsed key/value parameters of a button block. The reserved key "id" names
# the parent button (bare id, no prefix) for inheritance.
Arguments = dict[str, str]


def block_id(bare_id: str) -> str:
    """Return the stored block id for a bare button id: button-<id>."""
    return BUTTON_PREFIX + bare_id


def bare_id(entry_id: str) -> str:
    """Strip the button- prefix. Ids without the prefix come back unchanged."""
    head, sep, tail = entry_id.partition(BUTTON_PREFIX)
    return tail if sep else head


def is_button_block(block_id_: str) -> bool:
    return "button" in block_id_


@dataclass(frozen=True)
class Loc:
    """A point in a document: zero-based line and column, absolute char offset."""

    line: int
    col: int = 0
    offset: int = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Loc:
        return cls(
            line=int(d["line"]),
            col=int(d.get("col", 0)),
            offset=int(d.get("offset", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "col": self.col, "offset": self.offset}


@dataclass(frozen=True)
class Position:
    """Textual extent of a block.

    For a fenced button block start is the opening fence line and end the
    closing fence line; the arguments live strictly between the two.
    """

    start: Loc
    end: Loc

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Position:
        return cls(start=Loc.from_dict(d["start"]), end=Loc.from_dict(d["end"]))

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @property
    def inner_lines(self) -> slice:
        return slice(self.start.line + 1, self.end.line)


@dataclass(frozen=True)
class BlockCache:
    """A block reported by the metadata indexer: ^id marker plus extent."""

    id: str
    position: Position


@dataclass
class FileCache:
    """Block metadata for one document."""

    path: str
    content_hash: str = ""
    blocks: dict[str, BlockCache] = field(default_factory=dict)


@dataclass(frozen=True)
class Entry:
    """One indexed button block."""

    id: str                 # button-<bare id>
    path: str               # vault-relative POSIX path
    position: Position
    swap: int = 0           # transient display state, never written to the document

    @classmethod
    def from_block(cls, block: BlockCache, path: str) -> Entry:
        return cls(id=block.id, path=path, position=block.position, swap=0)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Entry:
        return cls(
            id=d["id"],
            path=d["path"],
            position=Position.from_dict(d["position"]),
            swap=int(d.get("swap", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "position": self.position.to_dict(),
            "swap": self.swap,
        }

    @property
    def bare_id(self) -> str:
        return bare_id(self.id)

    @property
    def range_key(self) -> tuple[str, int, int]:
        return (self.path, self.position.start.line, self.position.end.line)

    def with_swap(self, swap: int) -> Entry:
        return replace(self, swap=swap)


@dataclass(frozen=True)
class RenderedButton:
    """Arguments ready for rendering, plus the bare id of the stored button."""

    args: Arguments
    id: str
