"""Encoding of the expense collection for storage.

The whole collection is stored as one UTF-8 JSON document:

    {"version": 1, "expenses": [{"id": ..., "amount": ..., "category": ...,
                                 "date": "YYYY-MM-DD", "note": ...}, ...]}

A bare JSON list of expense objects (the unversioned layout) is read as
version 0.
"""

import json
import math
from datetime import date
from typing import Any

from spendbook.domain.models import CategoryName, Expense, ExpenseId, as_calendar_date

FORMAT_VERSION = 1

_FIELDS = ("id", "amount", "category", "date", "note")


def expense_to_dict(expense: Expense) -> dict[str, Any]:
    """Convert an expense to a JSON-compatible dictionary."""
    return {
        "id": expense.id,
        "amount": expense.amount,
        "category": expense.category,
        "date": as_calendar_date(expense.date).isoformat(),
        "note": expense.note,
    }


def expense_from_dict(data: Any) -> Expense:
    """Build an expense from a decoded JSON object.

    Args:
        data: Decoded JSON value for one expense.

    Returns:
        Expense.

    Raises:
        ValueError: If a field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object, got {type(data).__name__}")

    missing = [field for field in _FIELDS if field not in data]
    if missing:
        raise ValueError(f"Missing fields: {', '.join(missing)}")

    amount = data["amount"]
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValueError(f"Invalid amount: {amount!r}")
    try:
        amount = float(amount)
    except OverflowError as e:
        raise ValueError("Amount is too large") from e
    if not math.isfinite(amount):
        raise ValueError(f"Invalid amount: {amount!r}")

    for field in ("id", "category", "date", "note"):
        if not isinstance(data[field], str):
            raise ValueError(f"Field '{field}' must be a string")

    return Expense(
        id=ExpenseId(data["id"]),
        amount=amount,
        category=CategoryName(data["category"]),
        date=date.fromisoformat(data["date"]),
        note=data["note"],
    )


def encode_expenses(expenses: list[Expense]) -> bytes:
    """Encode the expense collection.

    Args:
        expenses: Expenses in insertion order.

    Returns:
        UTF-8 JSON bytes.

    Raises:
        ValueError: If an amount is not finite.
    """
    document = {
        "version": FORMAT_VERSION,
        "expenses": [expense_to_dict(expense) for expense in expenses],
    }
    return json.dumps(document, allow_nan=False, ensure_ascii=False).encode("utf-8")


def decode_expenses(blob: bytes) -> list[Expense]:
    """Decode an expense collection produced by encode_expenses.

    Args:
        blob: Stored bytes.

    Returns:
        Expenses in stored order.

    Raises:
        ValueError: If the blob is not a valid expense document.
    """
    try:
        document = json.loads(blob.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ValueError(f"Stored data is not UTF-8: {e}") from e
    except RecursionError as e:
        raise ValueError("Stored data is nested too deeply") from e

    if isinstance(document, list):
        items = document
    elif isinstance(document, dict):
        version = document.get("version")
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported format version: {version!r}")
        items = document.get("expenses")
        if not isinstance(items, list):
            raise ValueError("Field 'expenses' must be a list")
    else:
        raise ValueError(f"Unexpected document type: {type(document).__name__}")

    expenses = [expense_from_dict(item) for item in items]

    ids = [expense.id for expense in expenses]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate expense ids")

    return expenses
