"""Tests for resolving arguments through parent chains."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from buttons.inheritance import resolve_inherited_args

from tests.helpers import button, write_doc

if TYPE_CHECKING:
    from pathlib import Path

    from buttons.store import ButtonStore


def _index(tmp_path: Path, store: ButtonStore, *blocks: str) -> None:
    write_doc(tmp_path, "buttons.md", *blocks)
    store.initialize()


def test_child_overrides_parent(tmp_path: Path, store: ButtonStore) -> None:
    _index(
        tmp_path,
        store,
        button("base", {"color": "red", "size": "m"}),
        button("child", {"id": "base", "color": "blue"}),
    )
    args = asyncio.run(resolve_inherited_args(store, "child"))
    assert args == {"color": "blue", "size": "m", "id": "base"}


def test_no_parent_returns_own_args(tmp_path: Path, store: ButtonStore) -> None:
    _index(tmp_path, store, button("solo", {"name": "Solo", "id": "   "}))
    assert asyncio.run(resolve_inherited_args(store, "solo")) == {"name": "Solo", "id": ""}


def test_unknown_start_id(tmp_path: Path, store: ButtonStore) -> None:
    _index(tmp_path, store, button("solo", {"name": "Solo"}))
    assert asyncio.run(resolve_inherited_args(store, "nope")) is None


def test_missing_parent_degrades_to_own_args(tmp_path: Path, store: ButtonStore, caplog) -> None:
    _index(tmp_path, store, button("orphan", {"id": "ghost", "color": "red"}))
    with caplog.at_level("WARNING", logger="buttons.inheritance"):
        args = asyncio.run(resolve_inherited_args(store, "orphan"))
    assert args == {"id": "ghost", "color": "red"}
    assert "ghost" in caplog.text


def test_three_levels_merge_nearest_first(tmp_path: Path, store: ButtonStore) -> None:
    _index(
        tmp_path,
        store,
        button("root", {"color": "red", "size": "l", "type": "command"}),
        button("mid", {"id": "root", "size": "m"}),
        button("leaf", {"id": "mid", "name": "Leaf"}),
    )
    args = asyncio.run(resolve_inherited_args(store, "leaf"))
    assert args == {"color": "red", "size": "m", "type": "command", "id": "mid", "name": "Leaf"}


def test_chain_of_five_stops_after_four(tmp_path: Path, store: ButtonStore, caplog) -> None:
    _index(
        tmp_path,
        store,
        button("a", {"id": "b", "a": "1", "level": "a"}),
        button("b", {"id": "c", "b": "1", "level": "b"}),
        button("c", {"id": "d", "c": "1", "level": "c"}),
        button("d", {"id": "e", "d": "1", "level": "d"}),
        button("e", {"e": "1", "level": "e"}),
    )
    with caplog.at_level("WARNING", logger="buttons.inheritance"):
        args = asyncio.run(resolve_inherited_args(store, "a"))
    assert args == {"id": "b", "a": "1", "b": "1", "c": "1", "d": "1", "level": "a"}
    assert "e" not in args
    assert "truncated" in caplog.text


def test_chain_of_four_is_complete(tmp_path: Path, store: ButtonStore) -> None:
    _index(
        tmp_path,
        store,
        button("b", {"id": "c", "b": "1"}),
        button("c", {"id": "d", "c": "1"}),
        button("d", {"id": "e", "d": "1"}),
        button("e", {"e": "1"}),
    )
    args = asyncio.run(resolve_inherited_args(store, "b"))
    assert {"b", "c", "d", "e"} <= set(args)


def test_two_cycle_terminates(tmp_path: Path, store: ButtonStore) -> None:
    _index(
        tmp_path,
        store,
        button("a", {"id": "b", "color": "red"}),
        button("b", {"id": "a", "color": "blue", "size": "m"}),
    )
    args = asyncio.run(resolve_inherited_args(store, "a"))
    assert args == {"id": "b", "color": "red", "size": "m"}


def test_self_reference_terminates(tmp_path: Path, store: ButtonStore) -> None:
    _index(tmp_path, store, button("me", {"id": "me", "name": "Me"}))
    assert asyncio.run(resolve_inherited_args(store, "me")) == {"id": "me", "name": "Me"}


def test_parent_in_another_document(tmp_path: Path, store: ButtonStore) -> None:
    write_doc(tmp_path, "styles/base.md", button("base", {"color": "green"}))
    write_doc(tmp_path, "page.md", button("go", {"id": "base", "name": "Go"}))
    store.initialize()
    args = asyncio.run(resolve_inherited_args(store, "go"))
    assert args == {"color": "green", "id": "base", "name": "Go"}


def test_unreadable_start_document(tmp_path: Path, store: ButtonStore) -> None:
    doc = write_doc(tmp_path, "gone.md", button("lost", {"name": "Lost"}))
    store.initialize()
    doc.unlink()
    store.vault.forget("gone.md")
    assert asyncio.run(resolve_inherited_args(store, "lost")) is None
