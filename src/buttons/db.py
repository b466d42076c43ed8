"""Durable key-value slot backed by SQLite.

One table, one row per slot:

    kv(key TEXT PRIMARY KEY, value TEXT, updated_at TEXT)

The button index lives in a single slot (default key "buttons") as a JSON
array of entries. The DB is derived data: delete it and run `buttons reindex`.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from buttons.config import ButtonsConfig


def get_conn(db_path: Path) -> sqlite3.Connection:
    """Open the slot DB with WAL mode, creating parent dirs and schema."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # A 0-byte file makes PRAGMA fail with an opaque "disk I/O error"
    if db_path.exists() and db_path.stat().st_size == 0:
        msg = (
            f"SQLite DB is empty (0 bytes): {db_path}\n"
            f"Fix: rm {db_path}* && buttons reindex"
        )
        raise sqlite3.OperationalError(msg)
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute("PRAGMA journal_mode=WAL")
    except sqlite3.OperationalError as exc:
        conn.close()
        raise sqlite3.OperationalError(
            f"Failed to open DB {db_path} — may be corrupt.\n"
            f"Fix: rm {db_path}* && buttons reindex\n"
            f"Original error: {exc}"
        ) from exc
    _ensure_schema(conn)
    return conn


def _ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS kv (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT
        );
    """)
    conn.commit()


class Slot:
    """A single-scope key-value store: get_item / set_item."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    @classmethod
    def from_config(cls, cfg: ButtonsConfig) -> Slot:
        return cls(cfg.db_path)

    def get_item(self, key: str) -> str | None:
        if not self.db_path.exists():
            return None
        conn = get_conn(self.db_path)
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        conn = get_conn(self.db_path)
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv(key, value, updated_at) VALUES (?, ?, ?)",
                    (key, value, datetime.now(UTC).isoformat()),
                )
        finally:
            conn.close()
