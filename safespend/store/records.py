"""Key-value record storage.

Every function here fails soft: storage errors are logged and treated as a
missing record or a skipped write, so budgeting keeps working without a
usable database.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Protocol

from safespend.store.schema import get_db_path, init_database

logger = logging.getLogger(__name__)

APP_STATE_KEY = "appState"
GOAL_KEY = "goalCalculator"


class KeyValueSink(Protocol):
    """Storage collaborator holding structured records under string keys."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection, creating the schema if needed.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    init_database(db_path)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def get_record(key: str, db_path: Path | None = None) -> Any | None:
    """Read the record stored under ``key``.

    Args:
        key: Record key.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Decoded record, or None if missing or unreadable.
    """
    try:
        with _connect(db_path) as conn:
            row = conn.execute("SELECT value FROM records WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return json.loads(row["value"])
    except (sqlite3.Error, OSError, json.JSONDecodeError):
        logger.exception("Failed to read %s from storage", key)
        return None


def set_record(key: str, value: Any, db_path: Path | None = None) -> None:
    """Store ``value`` under ``key``, replacing any previous record.

    Args:
        key: Record key.
        value: JSON-serialisable record.
        db_path: Path to the database file. If None, uses default location.
    """
    try:
        payload = json.dumps(value)
        with _connect(db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO records (key, value, updated_at) VALUES (?, ?, datetime('now'))",
                (key, payload),
            )
            conn.commit()
    except (sqlite3.Error, OSError, TypeError, ValueError):
        logger.exception("Failed to write %s to storage", key)


def remove_record(key: str, db_path: Path | None = None) -> None:
    """Delete the record stored under ``key``."""
    try:
        with _connect(db_path) as conn:
            conn.execute("DELETE FROM records WHERE key = ?", (key,))
            conn.commit()
    except (sqlite3.Error, OSError):
        logger.exception("Failed to remove %s from storage", key)


def clear_records(db_path: Path | None = None) -> None:
    """Delete every stored record."""
    try:
        with _connect(db_path) as conn:
            conn.execute("DELETE FROM records")
            conn.commit()
    except (sqlite3.Error, OSError):
        logger.exception("Failed to clear storage")


class SqliteSink:
    """KeyValueSink backed by the SQLite records table."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()

    def get(self, key: str) -> Any | None:
        return get_record(key, self.db_path)

    def set(self, key: str, value: Any) -> None:
        set_record(key, value, self.db_path)

    def remove(self, key: str) -> None:
        remove_record(key, self.db_path)

    def clear(self) -> None:
        clear_records(self.db_path)


class MemorySink:
    """KeyValueSink held in a dict, for tests that shouldn't touch disk.

    Records round-trip through JSON like they do in the database.
    """

    def __init__(self) -> None:
        self._records: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._records.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        try:
            self._records[key] = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception("Failed to write %s to memory storage", key)

    def remove(self, key: str) -> None:
        self._records.pop(key, None)

    def clear(self) -> None:
        self._records.clear()
