"""ButtonsPlugin: lifecycle owner of the button index.

    plugin = ButtonsPlugin.from_config(load_config())
    plugin.load()                        # full rebuild, then "index-complete"
    plugin.on_file_changed("notes/a.md") # incremental update
    args = await plugin.get_button_by_id("save")
    plugin.unload()

Nothing here is global: each plugin instance owns its vault, metadata cache,
store and events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from buttons.backing import make_backing
from buttons.db import Slot
from buttons.events import INDEX_COMPLETE, Events
from buttons.inheritance import resolve_inherited_args
from buttons.metadata import MetadataCache
from buttons.store import ButtonStore
from buttons.variables import PLUGIN_NAME, PluginRegistry, assign_variable
from buttons.vault import Vault

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from buttons.backing import Backing
    from buttons.config import ButtonsConfig
    from buttons.models import Arguments, RenderedButton

logger = logging.getLogger("buttons.plugin")


class ButtonsPlugin:
    """Owns one ButtonStore for one vault."""

    def __init__(
        self,
        vault: Vault,
        backing: Backing,
        registry: PluginRegistry | None = None,
    ) -> None:
        self.vault = vault
        self.metadata = MetadataCache(vault)
        self.store = ButtonStore(vault, self.metadata, backing)
        self.events = Events()
        self.registry = registry if registry is not None else PluginRegistry()
        self.global_variables: dict[str, Any] = {}
        self.loaded = False

    @classmethod
    def from_config(cls, cfg: ButtonsConfig, registry: PluginRegistry | None = None) -> ButtonsPlugin:
        cfg.ensure_dirs()
        backing = make_backing(cfg.store.backing, Slot.from_config(cfg), cfg.store.slot)
        return cls(Vault.from_config(cfg), backing, registry)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> int:
        """Register, rebuild the index and signal index-complete. Returns entry count."""
        self.registry.register(PLUGIN_NAME, self)
        count = self.reindex()
        self.loaded = True
        return count

    def reindex(self) -> int:
        self.metadata.clear()
        count = self.store.initialize()
        self.events.trigger(INDEX_COMPLETE, count)
        return count

    def unload(self) -> None:
        self.store.clear()
        self.metadata.clear()
        self.events.reset()
        self.global_variables.clear()
        self.registry.unregister(PLUGIN_NAME)
        self.loaded = False

    def on_file_changed(self, path: Path | str) -> int:
        """Document-change notification: merge that document's buttons. Returns their count."""
        rel = self.vault.rel_path(path)
        if rel is None or not self.vault.is_markdown(rel):
            return 0
        self.vault.forget(rel)
        count = self.store.add_file(rel)
        logger.info("document updated: %s (%d button(s))", rel, count)
        return count

    async def wait_until_indexed(self) -> None:
        await self.events.wait(INDEX_COMPLETE)

    # ------------------------------------------------------------------
    # Lookups used by renderers
    # ------------------------------------------------------------------

    async def get_button_by_id(self, button_id: str) -> Arguments | None:
        return await resolve_inherited_args(self.store, button_id)

    async def get_button_from_store(
        self,
        button_id: str,
        extra_args: Mapping[str, str] | None = None,
    ) -> RenderedButton | None:
        return await self.store.resolve_rendered_button(button_id, extra_args)

    def get_swap(self, button_id: str) -> int | None:
        return self.store.get_swap(button_id)

    def set_swap(self, button_id: str, value: int) -> int | None:
        entry = self.store.set_swap(button_id, value)
        return None if entry is None else entry.swap

    async def apply_variable(self, button_id: str) -> bool:
        """Run a variable button: copy its value into the shared variable table."""
        args = await self.get_button_by_id(button_id)
        if args is None or args.get("type", "").strip().lower() != "variable":
            return False
        return assign_variable(self.registry, args)
