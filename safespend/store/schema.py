"""SQLite layout: a single table of JSON records keyed by name."""

import sqlite3
from contextlib import closing
from pathlib import Path

from safespend.config import get_data_dir

CREATE_RECORDS = """
    CREATE TABLE IF NOT EXISTS records (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
"""


def get_db_path() -> Path:
    return get_data_dir() / "safespend.db"


def init_database(db_path: Path | None = None) -> None:
    """Create the records table if it is missing.

    Raises:
        OSError: If the data directory can't be created.
        sqlite3.Error: If the table can't be created.
    """
    path = db_path if db_path is not None else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    # the inner ``with conn`` commits, or rolls back on error
    with closing(sqlite3.connect(path)) as conn, conn:
        conn.execute(CREATE_RECORDS)
