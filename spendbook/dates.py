"""Date utilities for spendbook.

Parsing of user-entered dates and formatting for display.
"""

from datetime import date

import pandas as pd


def parse_date(text: str | None) -> date:
    """Parse a user-entered date.

    Args:
        text: Date such as "2024-01-31", "31/01/2024" or "today".
            Empty or None means today.

    Returns:
        Calendar date.

    Raises:
        ValueError: If the text is not a recognisable date.
    """
    if text is None or not text.strip() or text.strip().lower() == "today":
        return date.today()

    text = text.strip()
    # ISO input must not go through dayfirst parsing
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {text}") from e

    if pd.isna(parsed):
        raise ValueError(f"Invalid date: {text}")
    return parsed.date()


def format_date(value: date) -> str:
    """Format a date for display (e.g. "Jan 01, 2024")."""
    return value.strftime("%b %d, %Y")
