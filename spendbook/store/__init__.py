"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from spendbook.store.persistence import STORAGE_KEY, load_expenses, save_expenses
from spendbook.store.preferences import (
    delete_preference,
    get_preference,
    list_preference_keys,
    set_preference,
)
from spendbook.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Preferences
    "delete_preference",
    "get_preference",
    "list_preference_keys",
    "set_preference",
    # Expenses
    "STORAGE_KEY",
    "load_expenses",
    "save_expenses",
]
