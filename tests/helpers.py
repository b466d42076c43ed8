"""Builders for Markdown vault documents used across the tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def button(bid: str, args: dict[str, str] | None = None) -> str:
    """Markdown for one button block with marker ^button-<bid>."""
    body = "\n".join(f"{k} {v}" for k, v in (args or {}).items())
    return f"```button\n{body}\n```\n^button-{bid}\n"


def write_doc(root: Path, rel: str, *blocks: str, preamble: str = "# Notes\n\n") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(preamble + "\n".join(blocks), encoding="utf-8")
    return path
