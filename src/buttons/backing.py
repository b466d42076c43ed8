"""Where the button index is read from.

Both backings write every change through to the durable slot. They differ in
the source of truth for reads:

    MemoryBacking      live in-process copy; the slot is only a mirror
    PersistedBacking   the slot itself, decoded on every read (several
                       processes sharing one vault see each other's writes)

A store picks its backing once, at construction.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from buttons.models import Entry

if TYPE_CHECKING:
    from buttons.db import Slot

logger = logging.getLogger("buttons.backing")


def encode_entries(entries: list[Entry]) -> str:
    return json.dumps([e.to_dict() for e in entries])


def decode_entries(raw: str | None) -> list[Entry] | None:
    """Decode a slot value. None when the slot is empty or unreadable."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("slot holds invalid JSON; treating the store as empty")
        return None
    if not isinstance(data, list):
        logger.warning("slot holds %s, expected a list; treating the store as empty", type(data).__name__)
        return None
    entries: list[Entry] = []
    for item in data:
        try:
            entries.append(Entry.from_dict(item))
        except (KeyError, TypeError, ValueError):
            logger.warning("skipping malformed entry in slot: %r", item)
    return entries


class Backing:
    """Base: persist to the slot; subclasses decide how reads are served."""

    def __init__(self, slot: Slot, key: str = "buttons") -> None:
        self.slot = slot
        self.key = key

    def load(self) -> list[Entry] | None:
        raise NotImplementedError

    def save(self, entries: list[Entry]) -> None:
        self.slot.set_item(self.key, encode_entries(entries))

    def clear(self) -> None:
        """Forget any live state. The durable slot survives."""


class MemoryBacking(Backing):
    def __init__(self, slot: Slot, key: str = "buttons") -> None:
        super().__init__(slot, key)
        self._entries: list[Entry] | None = None

    def load(self) -> list[Entry] | None:
        return None if self._entries is None else list(self._entries)

    def save(self, entries: list[Entry]) -> None:
        super().save(entries)
        self._entries = list(entries)

    def clear(self) -> None:
        self._entries = None


class PersistedBacking(Backing):
    def load(self) -> list[Entry] | None:
        return decode_entries(self.slot.get_item(self.key))


def make_backing(kind: str, slot: Slot, key: str = "buttons") -> Backing:
    if kind == "memory":
        return MemoryBacking(slot, key)
    if kind == "persisted":
        return PersistedBacking(slot, key)
    msg = f"unknown backing: {kind!r}"
    raise ValueError(msg)
