"""inotify watcher: watches the vault and merges changed documents into the index.

    python -m buttons.watcher [CONFIG_ROOT]

On startup the plugin is loaded (full rebuild). Then, on IN_CLOSE_WRITE or
IN_MOVED_TO for a Markdown document, that document is merged into the index
(incremental). Falls back to mtime polling if inotify is unavailable (macOS,
Docker).
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from buttons.config import load_config
from buttons.plugin import ButtonsPlugin

if TYPE_CHECKING:
    from buttons.config import ButtonsConfig

logger = logging.getLogger("buttons.watcher")

_INOTIFY_TIMEOUT_MS = 5000

# ---------------------------------------------------------------------------
# SIGHUP config reload
# ---------------------------------------------------------------------------

# Mutable container so the signal handler and the loop share state without a global rebind.
_reload_state: list[bool] = [False]


class _ReloadRequestedError(Exception):
    """Raised from within a watcher loop to trigger a config reload."""


def _handle_sighup(signum: int, frame: object) -> None:  # noqa: ARG001
    _reload_state[0] = True
    logger.info("SIGHUP received — config reload requested")


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _update_document(plugin: ButtonsPlugin, path: Path) -> None:
    try:
        plugin.on_file_changed(path)
    except Exception:
        logger.exception("failed to update document: %s", path)


def _skip_dir(plugin: ButtonsPlugin, directory: Path) -> bool:
    rel = plugin.vault.rel_path(directory)
    return rel is not None and rel != "." and any(part.startswith(".") for part in Path(rel).parts)


# ---------------------------------------------------------------------------
# inotify watcher
# ---------------------------------------------------------------------------

def watch_inotify(plugin: ButtonsPlugin) -> None:
    """Watch using inotify_simple (Linux). Blocks until a reload is requested."""
    import inotify_simple  # type: ignore[import]

    inotify = inotify_simple.INotify()
    flags = inotify_simple.flags  # type: ignore[attr-defined]
    mask = flags.CLOSE_WRITE | flags.MOVED_TO | flags.CREATE

    watched: dict[int, Path] = {}

    def _add(directory: Path) -> None:
        if _skip_dir(plugin, directory):
            return
        try:
            wd = inotify.add_watch(str(directory), mask)
        except OSError:
            return
        watched[wd] = directory

    root = plugin.vault.root
    _add(root)
    for sub in root.rglob("*"):
        if sub.is_dir():
            _add(sub)

    logger.info("inotify watching vault=%s (%d dirs)", root, len(watched))

    while True:
        for event in inotify.read(timeout=_INOTIFY_TIMEOUT_MS):
            if not event.name or event.wd not in watched:
                continue
            changed = watched[event.wd] / event.name
            if changed.is_dir():
                if event.mask & (flags.CREATE | flags.MOVED_TO):
                    _add(changed)
            elif changed.suffix == ".md" and event.mask & (flags.CLOSE_WRITE | flags.MOVED_TO):
                _update_document(plugin, changed)

        if _reload_state[0]:
            raise _ReloadRequestedError


# ---------------------------------------------------------------------------
# Polling fallback
# ---------------------------------------------------------------------------

def snapshot_mtimes(plugin: ButtonsPlugin) -> dict[str, float]:
    seen: dict[str, float] = {}
    for rel in plugin.vault.get_markdown_files():
        try:
            seen[rel] = plugin.vault.abs_path(rel).stat().st_mtime
        except OSError:
            continue
    return seen


def poll_once(plugin: ButtonsPlugin, seen: dict[str, float]) -> list[str]:
    """Merge every document that is new or whose mtime moved since seen. Returns their paths."""
    changed: list[str] = []
    for rel, mtime in snapshot_mtimes(plugin).items():
        if seen.get(rel, 0.0) < mtime:
            seen[rel] = mtime
            _update_document(plugin, plugin.vault.abs_path(rel))
            changed.append(rel)
    return changed


def watch_poll(plugin: ButtonsPlugin, interval: float = 1.0) -> None:
    """Polling fallback for macOS/Docker. Checks mtimes every interval seconds."""
    seen = snapshot_mtimes(plugin)
    logger.info("polling vault=%s interval=%.1fs", plugin.vault.root, interval)
    while True:
        poll_once(plugin, seen)
        if _reload_state[0]:
            raise _ReloadRequestedError
        time.sleep(interval)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(plugin: ButtonsPlugin, poll_interval: float = 1.0) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    count = plugin.load()
    logger.info("startup: index complete (%d buttons)", count)
    try:
        try:
            watch_inotify(plugin)
        except ImportError:
            logger.warning("inotify_simple not available, falling back to polling")
            watch_poll(plugin, interval=poll_interval)
    finally:
        plugin.unload()


def run_from_config(config_root: Path | None = None) -> None:
    """Load buttons.toml and start the watcher. Handles SIGHUP for live config reload."""
    import signal as _signal

    if hasattr(_signal, "SIGHUP"):
        _signal.signal(_signal.SIGHUP, _handle_sighup)

    while True:
        _reload_state[0] = False
        cfg: ButtonsConfig = load_config(config_root)
        plugin = ButtonsPlugin.from_config(cfg)
        try:
            run(plugin, poll_interval=cfg.watch.poll_interval)
            break
        except _ReloadRequestedError:
            logger.info("Reloading config from %s", config_root or Path.cwd())


if __name__ == "__main__":
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    run_from_config(root)
