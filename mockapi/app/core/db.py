"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations (``init_db``).  Objects
of every resource are stored as JSON documents in a single
``objects`` table keyed by resource name and id.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: document storage
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS objects (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            resource TEXT NOT NULL,
            key TEXT NOT NULL,
            body TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(resource, key)
        );
        """,
    ),
    # Migration 2: listing a resource scans by resource name
    (
        2,
        "CREATE INDEX IF NOT EXISTS idx_objects_resource ON objects(resource, seq);",
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the URL is an absolute path, use it directly.  Otherwise resolve
    it relative to the project root.  ``:memory:`` is rejected: every
    operation opens a new connection, and each in-memory connection is
    a separate, empty database.
    """
    db_url = database_url or settings.database_url
    if db_url == ":memory:":
        raise ConfigurationError("SQLite storage needs a database file; use STORAGE_BACKEND=memory instead")
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(database_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection with dict-like rows."""
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(database_url: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(database_url)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(database_url: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a migration, append it with an
    incremented version number.
    """
    with get_cursor(database_url) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY, applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current = row["version"] or 0
        for version, sql in MIGRATIONS:
            if version <= current:
                continue
            cursor.executescript(sql)
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            logger.info("Applied migration %s", version)
