"""Tests for the ^block-id metadata indexer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from buttons.metadata import MetadataCache, parse_blocks
from buttons.models import Loc

from tests.helpers import button, write_doc

if TYPE_CHECKING:
    from pathlib import Path

    from buttons.vault import Vault


def test_marker_after_fence_names_the_fence() -> None:
    blocks = parse_blocks("```button\nname Go\n```\n^button-go\n")
    block = blocks["button-go"]
    assert block.position.start == Loc(line=0, col=0, offset=0)
    assert block.position.end == Loc(line=2, col=3, offset=21)


def test_inner_lines_exclude_both_fences() -> None:
    text = "# Title\n\n" + button("go", {"name": "Go", "color": "blue"})
    block = parse_blocks(text)["button-go"]
    lines = text.split("\n")
    assert lines[block.position.inner_lines] == ["name Go", "color blue"]


def test_marker_after_blank_line_is_ignored() -> None:
    assert parse_blocks("```button\nname Go\n```\n\n^button-go\n") == {}


def test_inline_marker_names_paragraph() -> None:
    blocks = parse_blocks("intro\n\nfirst line\nsecond line ^quote-1\n")
    pos = blocks["quote-1"].position
    assert (pos.start.line, pos.end.line) == (2, 3)


def test_standalone_marker_closes_paragraph() -> None:
    blocks = parse_blocks("one\ntwo\n^para\n")
    pos = blocks["para"].position
    assert (pos.start.line, pos.end.line) == (0, 1)


def test_marker_inside_fence_is_content() -> None:
    assert parse_blocks("```\n^button-x\n```\n") == {}


def test_unclosed_fence_yields_nothing() -> None:
    assert parse_blocks("```button\nname Go\n^button-go\n") == {}


def test_longer_closing_fence_and_tildes() -> None:
    blocks = parse_blocks("~~~~button\nname Go\n~~~~~\n^button-go\n")
    pos = blocks["button-go"].position
    assert (pos.start.line, pos.end.line) == (0, 2)


def test_first_marker_wins_within_a_document() -> None:
    text = button("x", {"name": "first"}) + "\n" + button("x", {"name": "second"})
    assert parse_blocks(text)["button-x"].position.start.line == 0


def test_file_cache_reused_until_content_changes(tmp_path: Path, vault: Vault) -> None:
    path = write_doc(tmp_path, "a.md", button("go", {"name": "Go"}))
    cache = MetadataCache(vault)
    first = cache.get_file_cache("a.md")
    assert first is not None
    assert cache.get_file_cache("a.md") is first

    path.write_text(button("stop", {"name": "Stop"}), encoding="utf-8")
    vault.forget("a.md")
    second = cache.get_file_cache("a.md")
    assert second is not None
    assert set(second.blocks) == {"button-stop"}


def test_file_cache_none_for_missing_or_non_markdown(tmp_path: Path, vault: Vault) -> None:
    (tmp_path / "notes.txt").write_text(button("go"), encoding="utf-8")
    cache = MetadataCache(vault)
    assert cache.get_file_cache("missing.md") is None
    assert cache.get_file_cache("notes.txt") is None
