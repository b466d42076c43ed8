"""ButtonsConfig: project-local config for a button index over a Markdown vault.

Default layout (all relative to the project root):

    buttons.toml          # project config
    <vault files>.md      # documents containing button blocks
    .buttons/
        buttons.db        # SQLite key-value slot (derived; add to .gitignore)
        .gitignore        # auto-written: ignores everything in .buttons/

buttons.toml example:

    [buttons]
    name = "my-vault"
    # index_dir = ".buttons"   # default

    [vault]
    path = "."
    include = ["**/*.md"]
    exclude = [".buttons/**", "**/.obsidian/**", "**/.git/**"]
    use_git = false          # use git ls-files (respects .gitignore)

    [store]
    backing = "memory"       # "memory" (live cache) or "persisted" (slot is the source of truth)
    slot = "buttons"

    [watch]
    poll_interval = 1.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "buttons.toml"
_DEFAULT_INDEX_DIR = ".buttons"
_GITIGNORE_CONTENT = "*\n"

_DEFAULT_INCLUDE = ["**/*.md"]
_DEFAULT_EXCLUDE = [".buttons/**", "**/.obsidian/**", "**/.git/**", "**/.trash/**"]

BACKINGS = ("memory", "persisted")


@dataclass
class VaultConfig:
    """The [vault] section: where the Markdown documents live."""
    path: str = "."                         # relative to project root
    include: list[str] = field(default_factory=lambda: list(_DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(_DEFAULT_EXCLUDE))
    use_git: bool = False

    def resolve(self, root: Path) -> Path:
        return (root / self.path).resolve()


@dataclass
class StoreConfig:
    backing: str = "memory"
    slot: str = "buttons"


@dataclass
class WatchConfig:
    poll_interval: float = 1.0


@dataclass
class ButtonsConfig:
    """Resolved configuration for a button index."""

    root: Path                      # directory that contains buttons.toml
    name: str = ""
    index_dir: Path = field(default_factory=Path)
    vault: VaultConfig = field(default_factory=VaultConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @property
    def vault_dir(self) -> Path:
        return self.vault.resolve(self.root)

    @property
    def db_path(self) -> Path:
        return self.index_dir / "buttons.db"

    def ensure_dirs(self) -> None:
        """Create index_dir (and its .gitignore) if missing."""
        self.index_dir.mkdir(parents=True, exist_ok=True)
        gitignore = self.index_dir / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text(_GITIGNORE_CONTENT)


def load_config(root: Path | str | None = None) -> ButtonsConfig:
    """Load buttons.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    main = raw.get("buttons", {})
    vault_section = raw.get("vault", {})
    store_section = raw.get("store", {})
    watch_section = raw.get("watch", {})

    backing = str(store_section.get("backing", "memory"))
    if backing not in BACKINGS:
        msg = f"[store] backing must be one of {', '.join(BACKINGS)}, got {backing!r}"
        raise ValueError(msg)

    cfg = ButtonsConfig(
        root=root_path,
        name=main.get("name", root_path.name),
        index_dir=root_path / main.get("index_dir", _DEFAULT_INDEX_DIR),
        vault=VaultConfig(
            path=vault_section.get("path", "."),
            include=list(vault_section.get("include", _DEFAULT_INCLUDE)),
            exclude=list(vault_section.get("exclude", _DEFAULT_EXCLUDE)),
            use_git=bool(vault_section.get("use_git", False)),
        ),
        store=StoreConfig(
            backing=backing,
            slot=str(store_section.get("slot", "buttons")),
        ),
        watch=WatchConfig(
            poll_interval=float(watch_section.get("poll_interval", 1.0)),
        ),
    )
    if not cfg.vault_dir.is_dir():
        msg = f"vault directory does not exist: {cfg.vault_dir}"
        raise FileNotFoundError(msg)
    return cfg


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for buttons.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, name: str | None = None) -> Path:
    """Write a default buttons.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"buttons.toml already exists at {config_path}"
        raise FileExistsError(msg)

    project_name = name or root.name
    content = f"""\
[buttons]
name = "{project_name}"
# index_dir = ".buttons"   # default

[vault]
path = "."
# include = ["**/*.md"]
# exclude = [".buttons/**", "**/.obsidian/**", "**/.git/**", "**/.trash/**"]
# use_git = false     # use git ls-files to respect .gitignore

[store]
# backing = "memory"  # or "persisted": read the slot on every lookup
# slot = "buttons"

# [watch]
# poll_interval = 1.0   # seconds, polling fallback only
"""
    config_path.write_text(content)
    return config_path
