"""Global variable bridge: buttons of type ``variable`` write into a shared table.

    ```button
    name project
    type variable
    value kg-buttons
    ```

The table belongs to the plugin registered as "buttons". When that plugin is
not loaded the assignment is silently skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from buttons.models import Arguments

PLUGIN_NAME = "buttons"


@dataclass
class PluginRegistry:
    """Loaded plugins by name."""

    plugins: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str) -> Any | None:
        return self.plugins.get(name)

    def register(self, name: str, plugin: Any) -> None:
        self.plugins[name] = plugin

    def unregister(self, name: str) -> None:
        self.plugins.pop(name, None)


def assign_variable(registry: PluginRegistry, args: Arguments) -> bool:
    """Set global_variables[args["name"]] = args["value"]. Returns whether anything was written."""
    plugin = registry.get(PLUGIN_NAME)
    table = getattr(plugin, "global_variables", None) if plugin is not None else None
    name = args.get("name")
    if table is None or not name:
        return False
    table[name] = args.get("value", "")
    return True
