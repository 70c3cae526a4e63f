"""Storage layer - provides persistence for the application.

This module re-exports all public storage functions for easy importing.
"""

from safespend.store.records import (
    APP_STATE_KEY,
    GOAL_KEY,
    KeyValueSink,
    MemorySink,
    SqliteSink,
    clear_records,
    get_record,
    remove_record,
    set_record,
)
from safespend.store.schema import get_db_path, init_database

__all__ = [
    # Schema
    "get_db_path",
    "init_database",
    # Records
    "APP_STATE_KEY",
    "GOAL_KEY",
    "KeyValueSink",
    "MemorySink",
    "SqliteSink",
    "clear_records",
    "get_record",
    "remove_record",
    "set_record",
]
