"""Domain type definitions for spendbook.

These NewTypes provide semantic clarity and help with type checking:
- ExpenseId: Unique identifier of an expense (UUID4 string)
- CategoryName: Name of an expense category
"""

import uuid
from dataclasses import dataclass
from datetime import date as Date
from datetime import datetime
from typing import NewType

ExpenseId = NewType("ExpenseId", str)

CategoryName = NewType("CategoryName", str)

# Filter sentinel meaning "no category restriction"
ALL_CATEGORIES = CategoryName("All")

CATEGORIES: list[CategoryName] = [
    CategoryName("Food"),
    CategoryName("Transport"),
    CategoryName("Entertainment"),
    CategoryName("Shopping"),
    CategoryName("Bills"),
    CategoryName("Other"),
]

DEFAULT_CATEGORY = CATEGORIES[0]


@dataclass(frozen=True)
class Expense:
    """Immutable expense record.

    Edits produce a new record with the same id (see dataclasses.replace).
    """

    id: ExpenseId
    amount: float
    category: CategoryName
    date: Date
    note: str = ""


def generate_expense_id() -> ExpenseId:
    """Generate a fresh unique expense identifier."""
    return ExpenseId(str(uuid.uuid4()))


def as_calendar_date(value: Date) -> Date:
    """Drop any time of day, keeping the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def new_expense(amount: float, category: str, date: Date, note: str = "") -> Expense:
    """Create an expense record with a newly generated id.

    Args:
        amount: Expense amount.
        category: Category name.
        date: Calendar date of the expense.
        note: Optional free-form note.

    Returns:
        New Expense.
    """
    return Expense(
        id=generate_expense_id(),
        amount=amount,
        category=CategoryName(category),
        date=as_calendar_date(date),
        note=note,
    )
