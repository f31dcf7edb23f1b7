"""Whole-collection persistence of expenses.

The full expense list lives as one encoded blob under STORAGE_KEY in the
preferences table. Every save overwrites it; there are no partial writes.
"""

from pathlib import Path

from spendbook.domain.codec import decode_expenses, encode_expenses
from spendbook.domain.models import Expense
from spendbook.store.preferences import get_preference, set_preference
from spendbook.store.schema import database_exists, get_db_path, init_database

STORAGE_KEY = "expenses"


def save_expenses(expenses: list[Expense], db_path: Path | None = None) -> bool:
    """Write the whole expense collection, replacing the stored one.

    An encoding failure leaves the previously stored collection untouched.

    Args:
        expenses: Full expense collection.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if the collection was written, False if it could not be encoded.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if db_path is None:
        db_path = get_db_path()

    try:
        blob = encode_expenses(expenses)
    except (TypeError, ValueError):
        return False

    init_database(db_path)
    set_preference(STORAGE_KEY, blob, db_path)
    return True


def load_expenses(db_path: Path | None = None) -> list[Expense]:
    """Read the stored expense collection.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored expenses, or an empty list if nothing was saved yet or the
        stored data cannot be decoded.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if db_path is None:
        db_path = get_db_path()

    if not database_exists(db_path):
        return []

    init_database(db_path)
    blob = get_preference(STORAGE_KEY, db_path)
    if blob is None:
        return []

    try:
        return decode_expenses(blob)
    except ValueError:
        return []
