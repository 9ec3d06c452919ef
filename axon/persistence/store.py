"""
Key-Value State Store for Axon.

Provides the get/set JSON blob storage that player progress lives in:
- SQLiteKeyValueStore: portable on-disk store
- InMemoryKeyValueStore: process-local store for tests and throwaway runs

Database location: ~/.axon/state.db
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

JSONValue = Any


@runtime_checkable
class KeyValueStore(Protocol):
    """Blob store consumed by the progress repository."""

    def get(self, key: str) -> JSONValue | None:
        """Return the decoded value for key, or None if absent."""
        ...

    def set(self, key: str, value: JSONValue) -> None:
        """Store a JSON-serializable value under key."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store. Values are round-tripped through JSON like on disk."""

    def __init__(self, initial: dict[str, str] | None = None):
        # Raw JSON text, so malformed payloads can be seeded in tests
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> JSONValue | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: JSONValue) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SQLiteKeyValueStore:
    """
    SQLite-backed key-value persistence.

    One table, one row per key, values stored as JSON text. get() raises
    json.JSONDecodeError on a corrupted value; the repository decides
    what to fall back to.
    """

    DEFAULT_DB_PATH = Path.home() / ".axon" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the store.

        Args:
            db_path: Custom database path (defaults to ~/.axon/state.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.debug(f"SQLiteKeyValueStore initialized at {self.db_path}")

    @classmethod
    def from_settings(cls, settings=None) -> SQLiteKeyValueStore:
        if settings is None:
            from config import get_settings

            settings = get_settings()
        return cls(settings.state_db_path)

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def get(self, key: str) -> JSONValue | None:
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        if row is None:
            return None
        return json.loads(row["value"])

    def set(self, key: str, value: JSONValue) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(value)),
        )
        self.conn.commit()

    def set_raw(self, key: str, raw: str) -> None:
        """Store raw text without encoding (used to inspect corrupted rows)."""
        cursor = self.conn.cursor()
        cursor.execute(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, raw),
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self) -> list[str]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT key FROM kv_store ORDER BY key")
        return [row["key"] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
