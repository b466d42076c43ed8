"""Resolve a button's arguments through its chain of parents.

A button names its parent with an ``id`` line:

    ```button
    id base-style
    name Save
    ```
    ^button-save

Parent arguments come first and the child's override them, so the nearest
button wins on every shared key. A chain is followed for at most
MAX_CHAIN_LENGTH buttons including the starting one. A missing parent, a
cycle or an over-long chain does not fail the lookup: the last button that
could be resolved contributes its own arguments and the rest of the chain is
dropped (logged at WARNING).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from buttons.arguments import parent_of

if TYPE_CHECKING:
    from buttons.models import Arguments
    from buttons.store import ButtonStore

logger = logging.getLogger("buttons.inheritance")

MAX_CHAIN_LENGTH = 4
_MAX_DEPTH = MAX_CHAIN_LENGTH - 1


async def _resolve(
    store: ButtonStore,
    button_id: str,
    visited: set[str],
    depth: int,
) -> Arguments | None:
    if depth > _MAX_DEPTH:
        logger.warning("inheritance chain longer than %d at %r; truncated", MAX_CHAIN_LENGTH, button_id)
        return None
    if button_id in visited:
        logger.warning("inheritance cycle at %r; truncated", button_id)
        return None
    visited.add(button_id)

    args = await store.read_args(button_id)
    if args is None:
        if depth > 0:
            logger.warning("parent button %r not found", button_id)
        return None

    parent_id = parent_of(args)
    if not parent_id:
        return args

    parent_args = await _resolve(store, parent_id, visited, depth + 1)
    if parent_args is None:
        return args
    return {**parent_args, **args}


async def resolve_inherited_args(store: ButtonStore, button_id: str) -> Arguments | None:
    """Arguments of button-<button_id> merged with its ancestors'.

    None if the button does not exist, or if its own document cannot be read.
    """
    return await _resolve(store, button_id, set(), 0)
