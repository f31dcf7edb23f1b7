"""Location and schema of the preference database."""

import os
import sqlite3
from contextlib import closing
from pathlib import Path

# Stored in PRAGMA user_version so later layouts can tell this one apart
SCHEMA_VERSION = 1


def get_data_dir() -> Path:
    """Directory holding spendbook's data ($XDG_DATA_HOME/spendbook, or ~/.local/share/spendbook)."""
    base = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return Path(base) / "spendbook"


def get_db_path() -> Path:
    """Get the default database path."""
    return get_data_dir() / "spendbook.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check whether the preference database has been created.

    Args:
        db_path: Path to check. If None, uses default location.
    """
    return (db_path or get_db_path()).is_file()


def init_database(db_path: Path | None = None) -> None:
    """Create the preference database, or bring an existing one up to date.

    The single table maps a text key to an opaque BLOB value.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If the schema cannot be created.
        OSError: If the data directory cannot be created.
    """
    db_path = db_path or get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with closing(sqlite3.connect(db_path)) as conn:
        try:
            conn.execute("CREATE TABLE IF NOT EXISTS preferences (key TEXT PRIMARY KEY, value BLOB NOT NULL)")
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
