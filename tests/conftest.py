from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from buttons.backing import MemoryBacking, PersistedBacking
from buttons.db import Slot
from buttons.metadata import MetadataCache
from buttons.plugin import ButtonsPlugin
from buttons.store import ButtonStore
from buttons.vault import Vault

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture()
def vault(tmp_path: Path) -> Vault:
    return Vault(tmp_path)


@pytest.fixture()
def slot(tmp_path: Path) -> Slot:
    return Slot(tmp_path / ".buttons" / "buttons.db")


@pytest.fixture()
def make_store(vault: Vault, slot: Slot) -> Callable[..., ButtonStore]:
    def _make(backing: str = "memory") -> ButtonStore:
        backing_cls = MemoryBacking if backing == "memory" else PersistedBacking
        return ButtonStore(vault, MetadataCache(vault), backing_cls(slot))

    return _make


@pytest.fixture()
def store(make_store: Callable[..., ButtonStore]) -> ButtonStore:
    return make_store()


@pytest.fixture()
def plugin(vault: Vault, slot: Slot) -> ButtonsPlugin:
    return ButtonsPlugin(vault, MemoryBacking(slot))
