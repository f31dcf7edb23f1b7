"""Pure functions for expense views and aggregations.

This module contains the functional core for the expense list and chart:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations

Amounts are plain floats; rounding only happens when formatting for display.
"""

import math
import re
from collections.abc import Iterable, Sequence

from spendbook.domain.models import ALL_CATEGORIES, CategoryName, Expense, ExpenseId

# Plain digits, or digits grouped in threes by commas, with an optional decimal part
_AMOUNT_PATTERN = re.compile(r"(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?|\.\d+")


def filter_expenses(expenses: Sequence[Expense], category: str) -> list[Expense]:
    """Select the expenses visible under a category filter.

    Args:
        expenses: Full expense collection in insertion order.
        category: Category to keep, or ALL_CATEGORIES for no restriction.

    Returns:
        Matching expenses, preserving their relative order.
    """
    if category == ALL_CATEGORIES:
        return list(expenses)
    return [expense for expense in expenses if expense.category == category]


def total_amount(expenses: Iterable[Expense]) -> float:
    """Sum the amounts of the given expenses (0.0 when empty)."""
    return sum((expense.amount for expense in expenses), 0.0)


def group_by_category(expenses: Iterable[Expense]) -> dict[CategoryName, float]:
    """Total the expenses per category.

    Args:
        expenses: Expenses to group.

    Returns:
        Dictionary mapping category names to summed amounts. Key order is
        not meaningful; use sort_category_totals for display.
    """
    totals: dict[CategoryName, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def sort_category_totals(
    totals: dict[CategoryName, float],
    sort_by: str = "alpha",
) -> list[tuple[CategoryName, float]]:
    """Sort category totals by name or by amount.

    Args:
        totals: Dictionary of category totals.
        sort_by: Sort method - "alpha" or "value" (largest first).

    Returns:
        Sorted list of (category, total) tuples.
    """
    if sort_by == "value":
        return sorted(totals.items(), key=lambda x: x[1], reverse=True)
    return sorted(totals.items(), key=lambda x: x[0])


def positions_to_ids(view: Sequence[Expense], positions: Iterable[int]) -> list[ExpenseId]:
    """Resolve positions in a list view to expense ids.

    Args:
        view: The list the positions refer to (usually the filtered view).
        positions: Zero-based positions into view.

    Returns:
        Ids of the addressed expenses, without duplicates, in view order.

    Raises:
        IndexError: If any position is outside the view.
    """
    wanted = set(positions)
    for position in wanted:
        if not 0 <= position < len(view):
            raise IndexError(f"Position {position} is out of range (0-{len(view) - 1})")
    return [expense.id for idx, expense in enumerate(view) if idx in wanted]


def calculate_bar_length(amount: float, max_amount: float, bar_width: int) -> int:
    """Calculate chart bar length.

    Args:
        amount: Amount to display.
        max_amount: Largest amount in the chart.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def parse_amount(text: str) -> float | None:
    """Parse a user-entered amount.

    Args:
        text: Raw input such as "12.50" or "1,200".

    Returns:
        The amount, or None unless the input is a finite non-negative
        decimal number (no signs, exponents or underscores).
    """
    if not isinstance(text, str):
        return None
    text = text.strip()
    if not _AMOUNT_PATTERN.fullmatch(text):
        return None
    amount = float(text.replace(",", ""))
    if not math.isfinite(amount):
        return None
    return amount


def format_amount(amount: float, symbol: str = "$") -> str:
    """Format an amount for display with two decimals."""
    return f"{symbol}{amount:,.2f}"
