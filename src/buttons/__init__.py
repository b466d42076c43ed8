"""Index of button blocks in a Markdown vault.

Layout:
    <vault>/
        *.md                  # documents; a button is a ```button fence
                              # followed by a ^button-<id> marker line
    .buttons/
        buttons.db            # SQLite key-value slot holding the index as JSON

A button block:

    ```button
    name Save
    type command
    action Save current file
    id base-style             # optional parent button to inherit from
    ```
    ^button-save

The index is rebuilt wholesale on load/reindex and merged per document on
change. Swap counters are kept in the index only, never in the documents.
"""

from buttons.config import ButtonsConfig, init_config, load_config
from buttons.models import Entry, Loc, Position, RenderedButton
from buttons.plugin import ButtonsPlugin
from buttons.store import ButtonStore, remove_duplicates

__all__ = [
    "ButtonStore",
    "ButtonsConfig",
    "ButtonsPlugin",
    "Entry",
    "Loc",
    "Position",
    "RenderedButton",
    "init_config",
    "load_config",
    "remove_duplicates",
]
