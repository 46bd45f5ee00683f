"""Durable key-value storage for serialized sessions and documents.

Values are opaque strings (JSON documents in practice). ``SqliteStore`` keeps
them in a single-file SQLite table so conversations survive restarts;
``MemoryStore`` is the process-local variant used for tests and previews.
"""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

_KV_DDL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class PersistentStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-memory store; contents vanish with the process."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class SqliteStore:
    """SQLite-backed store.

    One connection per operation; writes are serialized by a lock so two
    upserts of the same key never interleave.
    """

    def __init__(self, db_path: str | Path) -> None:
        path = Path(db_path)
        if not path.is_absolute():
            path = Path.cwd() / path
        if path.suffix != ".db":
            path = path.with_suffix(".db")
        self._db_path = path
        self._write_lock = threading.Lock()
        self._init()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _init(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self._db_path) as connection:
            connection.execute("PRAGMA journal_mode = WAL;")
            connection.execute(_KV_DDL)
            connection.commit()
        logger.info(f"Session store initialised at {self._db_path}")

    def get(self, key: str) -> str | None:
        with sqlite3.connect(self._db_path) as connection:
            row = connection.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._write_lock, sqlite3.connect(self._db_path) as connection:
            connection.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?)"
                " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
            connection.commit()

    def delete(self, key: str) -> None:
        with self._write_lock, sqlite3.connect(self._db_path) as connection:
            connection.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            connection.commit()
