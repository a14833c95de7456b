"""
Database adapter

SQLite (WAL mode) connection management.
"""

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    get_db_path,
    create_connection,
    init_schema,
)

__all__ = [
    "SQLiteAdapter",
    "get_db_path",
    "create_connection",
    "init_schema",
]
