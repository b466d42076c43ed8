"""Named events with callbacks and awaitable completion.

    events.on("index-complete", callback)
    events.trigger("index-complete")
    await events.wait("index-complete")   # returns at once if already triggered

Waiters are futures of whichever loop is running when wait() is called, so
one Events instance can be awaited from successive asyncio.run() calls.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("buttons.events")

INDEX_COMPLETE = "index-complete"


class Events:
    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = defaultdict(list)
        self._waiters: dict[str, list[asyncio.Future[None]]] = defaultdict(list)
        self._fired: set[str] = set()

    def on(self, name: str, handler: Callable[..., Any]) -> None:
        self._handlers[name].append(handler)

    def off(self, name: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def trigger(self, name: str, *args: Any) -> None:
        self._fired.add(name)
        for waiter in self._waiters.pop(name, []):
            if not waiter.done():
                waiter.set_result(None)
        for handler in list(self._handlers.get(name, [])):
            try:
                handler(*args)
            except Exception:
                logger.exception("handler for %r failed", name)

    def has_fired(self, name: str) -> bool:
        return name in self._fired

    async def wait(self, name: str) -> None:
        if name in self._fired:
            return
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters[name].append(waiter)
        try:
            await waiter
        finally:
            pending = self._waiters.get(name)
            if pending and waiter in pending:
                pending.remove(waiter)

    def reset(self, name: str | None = None) -> None:
        """Forget that an event fired (all events if name is None)."""
        if name is None:
            self._fired.clear()
        else:
            self._fired.discard(name)
