"""Vault: the Markdown document collection the index is built from.

Documents are addressed by vault-relative POSIX paths ("notes/daily.md").
Reads are coroutines: the blocking read runs in a worker thread and the
result is cached until the file's mtime changes.
"""

from __future__ import annotations

import asyncio
import subprocess
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from buttons.config import VaultConfig

if TYPE_CHECKING:
    from buttons.config import ButtonsConfig


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------

def _git_files(vault_dir: Path) -> list[Path] | None:
    """Return git-tracked (and untracked, not ignored) files. None if not a git repo."""
    try:
        result = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard"],
            cwd=vault_dir,
            capture_output=True,
            text=True,
            check=True,
            timeout=10,
        )
        return [vault_dir / p for p in result.stdout.splitlines() if p]
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
        return None


def _matches(rel: str, patterns: list[str]) -> bool:
    # "**/x/**" should also match "x/..." at the vault root
    return any(fnmatch(rel, pat.lstrip("/")) or fnmatch("/" + rel, pat) for pat in patterns)


def _glob_files(vault_dir: Path) -> list[Path]:
    # include patterns are applied by the caller
    return [p for p in vault_dir.rglob("*.md") if p.is_file()]


def collect_markdown_files(vault_dir: Path, vault: VaultConfig) -> list[str]:
    """Return sorted vault-relative paths of all indexable Markdown documents."""
    if not vault_dir.exists():
        return []

    candidates: list[Path] | None = None
    if vault.use_git:
        candidates = _git_files(vault_dir)
    if candidates is None:
        candidates = _glob_files(vault_dir)

    result: set[str] = set()
    for p in candidates:
        if p.suffix != ".md" or not p.is_file():
            continue
        rel = p.relative_to(vault_dir).as_posix()
        if not _matches(rel, vault.include) and not _matches(p.name, vault.include):
            continue
        if _matches(rel, vault.exclude):
            continue
        result.add(rel)
    return sorted(result)


# ---------------------------------------------------------------------------
# Vault
# ---------------------------------------------------------------------------

class Vault:
    """Directory-backed content repository."""

    def __init__(self, root: Path | str, config: VaultConfig | None = None) -> None:
        self.root = Path(root)
        self.config = config or VaultConfig()
        self._read_cache: dict[str, tuple[int, str]] = {}

    @classmethod
    def from_config(cls, cfg: ButtonsConfig) -> Vault:
        return cls(cfg.vault_dir, cfg.vault)

    def get_markdown_files(self) -> list[str]:
        return collect_markdown_files(self.root, self.config)

    def rel_path(self, path: Path | str) -> str | None:
        """Vault-relative POSIX path for an absolute or relative path, or None if outside."""
        p = Path(path)
        if not p.is_absolute():
            return PurePosixPath(p.as_posix()).as_posix()
        try:
            return p.resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return None

    def abs_path(self, rel: str) -> Path:
        return self.root / rel

    def is_markdown(self, rel: str) -> bool:
        return (
            rel.endswith(".md")
            and (_matches(rel, self.config.include) or _matches(PurePosixPath(rel).name, self.config.include))
            and not _matches(rel, self.config.exclude)
        )

    def exists(self, rel: str) -> bool:
        return self.abs_path(rel).is_file()

    def read(self, rel: str) -> str:
        """Blocking read with mtime-keyed caching."""
        path = self.abs_path(rel)
        mtime = path.stat().st_mtime_ns
        cached = self._read_cache.get(rel)
        if cached is not None and cached[0] == mtime:
            return cached[1]
        text = path.read_text(encoding="utf-8", errors="replace")
        self._read_cache[rel] = (mtime, text)
        return text

    async def cached_read(self, rel: str) -> str:
        """Read a document's full text without blocking the event loop."""
        return await asyncio.to_thread(self.read, rel)

    async def read_lines(self, rel: str) -> list[str]:
        text = await self.cached_read(rel)
        return text.split("\n")

    def forget(self, rel: str) -> None:
        self._read_cache.pop(rel, None)
