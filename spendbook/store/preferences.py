"""Key/value preference queries."""

import sqlite3
from contextlib import closing
from pathlib import Path

from spendbook.store.schema import get_db_path


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def get_preference(key: str, db_path: Path | None = None) -> bytes | None:
    """Read the value stored under a key.

    Values written by something other than set_preference are returned as
    bytes too: text is UTF-8 encoded, numbers use their text form.

    Args:
        key: Preference key.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored bytes, or None if the key is absent.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with closing(_connect(db_path)) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM preferences WHERE key = ?", (key,))
        row = cursor.fetchone()
        if row is None:
            return None
        value = row["value"]
        if isinstance(value, bytes):
            return value
        return str(value).encode("utf-8")


def set_preference(key: str, value: bytes, db_path: Path | None = None) -> None:
    """Store a value under a key, replacing any previous value.

    Args:
        key: Preference key.
        value: Bytes to store.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with closing(_connect(db_path)) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO preferences (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, sqlite3.Binary(value)),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_preference(key: str, db_path: Path | None = None) -> bool:
    """Remove a key.

    Args:
        key: Preference key.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if the key existed.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with closing(_connect(db_path)) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM preferences WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def list_preference_keys(db_path: Path | None = None) -> list[str]:
    """List all stored keys in alphabetical order."""
    with closing(_connect(db_path)) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT key FROM preferences ORDER BY key")
        return [row["key"] for row in cursor.fetchall()]
