"""Key-value persistence for habitlog.

Habits and entries are stored as whole serialized blobs under a fixed key and
rewritten in full after every change. The SQLite backend keeps them in a single
table; the memory backend is used by tests and snapshots.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

HABITS_KEY = "saved_habits"
ENTRIES_KEY = "saved_entries"


def get_data_dir() -> Path:
    """Get the data directory, creating if needed."""
    env_dir = os.environ.get("HABITLOG_DIR")
    if env_dir:
        data_dir = Path(env_dir)
    else:
        data_dir = Path.home() / ".local" / "share" / "habitlog"

    data_dir.mkdir(parents=True, exist_ok=True)
    try:
        data_dir.chmod(0o700)
    except OSError:
        pass  # May fail on some filesystems
    return data_dir


def get_db_path() -> Path:
    """Get the database file path."""
    return get_data_dir() / "habitlog.db"


SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT (datetime('now'))
);
"""


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Get a database connection with proper settings."""
    if db_path is None:
        db_path = get_db_path()

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def init_db(db_path: Optional[Path] = None) -> None:
    """Initialize the database with schema."""
    if db_path is None:
        db_path = get_db_path()

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()

    try:
        db_path.chmod(0o600)
    except OSError:
        pass


def db_exists(db_path: Optional[Path] = None) -> bool:
    """Check if database exists."""
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def ensure_db(db_path: Optional[Path] = None) -> None:
    """Ensure database exists and is initialized."""
    if not db_exists(db_path):
        init_db(db_path)


class KeyValueBackend(Protocol):
    """Anything that can durably store a blob under a key."""

    def save(self, key: str, blob: str) -> None:
        ...

    def load(self, key: str) -> Optional[str]:
        ...


class SQLiteBackend:
    """Blob storage in a local SQLite file."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path if db_path is not None else get_db_path()
        ensure_db(self.db_path)

    def save(self, key: str, blob: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, blob),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Saved %s (%d bytes)", key, len(blob))

    def load(self, key: str) -> Optional[str]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def keys(self) -> list:
        """List stored keys."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT key FROM kv_store ORDER BY key")
            return [row["key"] for row in cursor.fetchall()]
        finally:
            conn.close()


class MemoryBackend:
    """Dict-backed storage for tests and read snapshots."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def save(self, key: str, blob: str) -> None:
        self.data[key] = blob

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)
