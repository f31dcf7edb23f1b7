"""Domain models and types for spendbook.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from spendbook.domain.models import (
    ALL_CATEGORIES,
    CATEGORIES,
    DEFAULT_CATEGORY,
    CategoryName,
    Expense,
    ExpenseId,
    new_expense,
)

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "CategoryName",
    "Expense",
    "ExpenseId",
    "new_expense",
]
