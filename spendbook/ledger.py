"""The expense store: owner of the expense collection and the category filter.

Commands create one ExpenseStore per invocation and pass it to whatever
renders it. Every mutation writes the whole collection back to storage
before returning.
"""

import dataclasses
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from spendbook.domain.expenses import (
    filter_expenses,
    group_by_category,
    positions_to_ids,
    sort_category_totals,
    total_amount,
)
from spendbook.domain.models import ALL_CATEGORIES, CategoryName, Expense, as_calendar_date, new_expense
from spendbook.store.persistence import load_expenses, save_expenses
from spendbook.store.schema import get_db_path


class ExpenseStore:
    """In-memory expense collection backed by the preference store."""

    def __init__(self, expenses: list[Expense] | None = None, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()
        self.expenses: list[Expense] = list(expenses) if expenses else []
        self.selected_category: CategoryName = ALL_CATEGORIES

    @classmethod
    def open(cls, db_path: Path | None = None) -> "ExpenseStore":
        """Load the stored collection into a new store.

        Args:
            db_path: Path to the database file. If None, uses default location.

        Returns:
            ExpenseStore with the filter set to all categories.
        """
        if db_path is None:
            db_path = get_db_path()
        return cls(load_expenses(db_path), db_path)

    def _save(self) -> bool:
        return save_expenses(self.expenses, self.db_path)

    def select_category(self, category: str) -> None:
        """Set the active category filter (ALL_CATEGORIES clears it)."""
        self.selected_category = CategoryName(category)

    def add(self, amount: float, category: str, date: date, note: str = "") -> Expense:
        """Append a new expense and save.

        The amount must already be a parsed number; see parse_amount.

        Returns:
            The new expense.
        """
        expense = new_expense(amount, category, date, note)
        self.expenses.append(expense)
        self._save()
        return expense

    def update(self, expense: Expense) -> bool:
        """Replace the stored expense with the same id, keeping its position.

        Args:
            expense: Edited expense.

        Returns:
            True if an expense was replaced, False if the id is unknown
            (the collection is left as it was).
        """
        expense = dataclasses.replace(expense, date=as_calendar_date(expense.date))
        for idx, existing in enumerate(self.expenses):
            if existing.id == expense.id:
                self.expenses[idx] = expense
                self._save()
                return True
        return False

    def delete(self, positions: Iterable[int]) -> list[Expense]:
        """Remove expenses by their positions in the filtered view.

        Args:
            positions: Zero-based positions into filtered_expenses().

        Returns:
            The removed expenses.

        Raises:
            IndexError: If any position is out of range; nothing is removed.
        """
        ids = set(positions_to_ids(self.filtered_expenses(), positions))
        removed = [expense for expense in self.expenses if expense.id in ids]
        self.expenses = [expense for expense in self.expenses if expense.id not in ids]
        self._save()
        return removed

    def get(self, position: int) -> Expense:
        """Return the expense at a position of the filtered view.

        Raises:
            IndexError: If the position is out of range.
        """
        view = self.filtered_expenses()
        if not 0 <= position < len(view):
            raise IndexError(f"Position {position} is out of range")
        return view[position]

    def filtered_expenses(self) -> list[Expense]:
        """Expenses under the active filter, in insertion order."""
        return filter_expenses(self.expenses, self.selected_category)

    def total_expenses(self) -> float:
        """Sum of amounts under the active filter."""
        return total_amount(self.filtered_expenses())

    def expenses_by_category(self) -> dict[CategoryName, float]:
        """Per-category totals under the active filter (unordered)."""
        return group_by_category(self.filtered_expenses())

    def sorted_category_totals(self, sort_by: str = "alpha") -> list[tuple[CategoryName, float]]:
        """Per-category totals ordered by name ("alpha") or largest first ("value")."""
        return sort_category_totals(self.expenses_by_category(), sort_by)
