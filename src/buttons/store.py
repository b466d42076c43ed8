"""ButtonStore: the index of button blocks in a vault.

Entry points:
    store.initialize()                 # full rebuild (startup / reindex)
    store.add_file(path)               # incremental (called on document change)
    store.get_raw(id)                  # entry for button-<id>
    await store.resolve_rendered_button(id, extra_args)
    store.get_swap(id) / store.set_swap(id, value)

The store is an ordered id -> Entry mapping. Every mutation is written through
the backing to the durable slot. Mutations are read-modify-write with no
locking: two processes updating one slot at the same time lose the earlier
write.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from buttons.arguments import parse_arguments
from buttons.models import Entry, RenderedButton, block_id, is_button_block

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from buttons.backing import Backing
    from buttons.metadata import MetadataCache
    from buttons.models import Arguments, FileCache
    from buttons.vault import Vault

logger = logging.getLogger("buttons.store")


def build_button_array(cache: FileCache | None, path: str) -> list[Entry]:
    """Entries for every button block in one document's metadata (may be empty)."""
    if cache is None or not cache.blocks:
        return []
    return [
        Entry.from_block(block, path)
        for key, block in cache.blocks.items()
        if is_button_block(key)
    ]


def remove_duplicates(entries: Iterable[Entry]) -> list[Entry]:
    """Keep the first entry of each group sharing an id or a path + line range."""
    seen_ids: set[str] = set()
    seen_ranges: set[tuple[str, int, int]] = set()
    result: list[Entry] = []
    for entry in entries:
        if entry.id in seen_ids or entry.range_key in seen_ranges:
            continue
        seen_ids.add(entry.id)
        seen_ranges.add(entry.range_key)
        result.append(entry)
    return result


class ButtonStore:
    """Button index over one vault, persisted through a backing."""

    def __init__(self, vault: Vault, metadata: MetadataCache, backing: Backing) -> None:
        self.vault = vault
        self.metadata = metadata
        self.backing = backing

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def entries(self) -> list[Entry]:
        return self.backing.load() or []

    def __len__(self) -> int:
        return len(self.entries())

    def _index(self) -> dict[str, Entry]:
        return {e.id: e for e in self.entries()}

    def get_raw(self, button_id: str) -> Entry | None:
        """Entry stored as button-<button_id>, or None."""
        return self._index().get(block_id(button_id))

    async def read_args(self, button_id: str) -> Arguments | None:
        """Parse the stored block's current text. No inheritance, no merge."""
        entry = self.get_raw(button_id)
        if entry is None:
            return None
        try:
            lines = await self.vault.read_lines(entry.path)
        except OSError as exc:
            logger.warning("cannot read %s for %s: %s", entry.path, entry.id, exc)
            return None
        return parse_arguments("\n".join(lines[entry.position.inner_lines]))

    async def resolve_rendered_button(
        self,
        button_id: str,
        extra_args: Mapping[str, str] | None = None,
    ) -> RenderedButton | None:
        """Stored arguments overridden by extra_args, plus the bare id."""
        if not button_id:
            return None
        entry = self.get_raw(button_id)
        if entry is None:
            return None
        stored = await self.read_args(button_id)
        if stored is None:
            return None
        return RenderedButton(args={**stored, **(extra_args or {})}, id=entry.bare_id)

    def get_swap(self, button_id: str) -> int | None:
        entry = self.get_raw(button_id)
        return None if entry is None else entry.swap

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def _save(self, entries: list[Entry]) -> None:
        self.backing.save(entries)

    def initialize(self) -> int:
        """Full rebuild from every document in the vault. Returns entry count."""
        collected: list[Entry] = []
        files = self.vault.get_markdown_files()
        for path in files:
            collected.extend(build_button_array(self.metadata.get_file_cache(path), path))
        entries = remove_duplicates(collected)
        if len(entries) != len(collected):
            logger.info("rebuild: dropped %d duplicate button(s)", len(collected) - len(entries))
        self._save(entries)
        logger.info("rebuild: %d button(s) in %d document(s)", len(entries), len(files))
        return len(entries)

    def add_file(self, path: str) -> int:
        """Merge one document's buttons into the store. Returns how many it contributed."""
        buttons = build_button_array(self.metadata.get_file_cache(path), path)
        current = self.backing.load()
        if current is None:
            merged = remove_duplicates(buttons)
        else:
            # fresh entries first: they replace stale copies of the same id or range
            merged = remove_duplicates([*buttons, *current])
        self._save(merged)
        logger.debug("update %s: %d button(s), store now %d", path, len(buttons), len(merged))
        return len(buttons)

    def set_swap(self, button_id: str, value: int) -> Entry | None:
        """Overwrite the swap counter of button-<button_id>. None if there is no such button."""
        key = block_id(button_id)
        index = self._index()
        entry = index.get(key)
        if entry is None:
            return None
        index[key] = entry.with_swap(value)
        self._save(list(index.values()))
        return index[key]

    def clear(self) -> None:
        self.backing.clear()
