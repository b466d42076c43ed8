"""Block metadata indexer: find ``^block-id`` markers in Markdown documents.

A marker alone on the line directly after a block names that block:

    ```button
    name Refresh
    type command
    action Reload app without saving
    ```
    ^button-refresh

A marker at the end of a paragraph line names the paragraph:

    Some text here ^quote-1

Positions use zero-based lines. For a fenced block, start is the opening
fence line and end is the closing fence line.

Parsed results are cached per document by content hash, so repeated lookups
of an unchanged document do not re-parse it.
"""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING

from buttons.models import BlockCache, FileCache, Loc, Position

if TYPE_CHECKING:
    from buttons.vault import Vault

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_STANDALONE_ID_RE = re.compile(r"^\s*\^([A-Za-z0-9-]+)\s*$")
_INLINE_ID_RE = re.compile(r"\s\^([A-Za-z0-9-]+)\s*$")


def _content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8", errors="replace")).hexdigest()[:16]


def _line_offsets(lines: list[str]) -> list[int]:
    offsets: list[int] = []
    pos = 0
    for line in lines:
        offsets.append(pos)
        pos += len(line) + 1
    return offsets


def parse_blocks(text: str) -> dict[str, BlockCache]:
    """Return block id -> BlockCache for every marker in text. First marker wins."""
    lines = text.split("\n")
    offsets = _line_offsets(lines)
    blocks: dict[str, BlockCache] = {}

    def _add(block_id: str, start: int, end: int) -> None:
        if block_id in blocks:
            return
        position = Position(
            start=Loc(line=start, col=0, offset=offsets[start]),
            end=Loc(line=end, col=len(lines[end]), offset=offsets[end] + len(lines[end])),
        )
        blocks[block_id] = BlockCache(id=block_id, position=position)

    fence: tuple[str, int, int] | None = None   # (char, length, start line)
    para_start: int | None = None
    last: tuple[int, int] | None = None         # most recently closed block

    for lineno, line in enumerate(lines):
        if fence is not None:
            char, length, start = fence
            stripped = line.strip()
            if stripped.startswith(char * length) and not stripped.strip(char):
                last = (start, lineno)
                fence = None
            continue

        m = _FENCE_RE.match(line)
        if m:
            if para_start is not None:
                last = (para_start, lineno - 1)
                para_start = None
            marker = m.group(1)
            fence = (marker[0], len(marker), lineno)
            continue

        m = _STANDALONE_ID_RE.match(line)
        if m:
            if para_start is not None:
                _add(m.group(1), para_start, lineno - 1)
            elif last is not None and last[1] == lineno - 1:
                _add(m.group(1), *last)
            para_start = None
            last = None
            continue

        if not line.strip():
            if para_start is not None:
                last = (para_start, lineno - 1)
                para_start = None
            continue

        if para_start is None:
            para_start = lineno
        m = _INLINE_ID_RE.search(line)
        if m:
            _add(m.group(1), para_start, lineno)
            para_start = None
            last = None

    return blocks


class MetadataCache:
    """Per-document block metadata for a vault."""

    def __init__(self, vault: Vault) -> None:
        self.vault = vault
        self._cache: dict[str, FileCache] = {}

    def get_file_cache(self, rel: str) -> FileCache | None:
        """Block metadata for a document, or None if it is missing or not Markdown."""
        if not self.vault.is_markdown(rel) or not self.vault.exists(rel):
            self._cache.pop(rel, None)
            return None
        try:
            text = self.vault.read(rel)
        except OSError:
            return None
        digest = _content_hash(text)
        cached = self._cache.get(rel)
        if cached is not None and cached.content_hash == digest:
            return cached
        file_cache = FileCache(path=rel, content_hash=digest, blocks=parse_blocks(text))
        self._cache[rel] = file_cache
        return file_cache

    def clear(self) -> None:
        self._cache.clear()
