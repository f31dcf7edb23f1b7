"""Expense management commands (add, list, edit, delete)."""

import dataclasses
import datetime
import sqlite3
import sys
import tomllib

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from spendbook.config import Settings, load_settings
from spendbook.dates import format_date, parse_date
from spendbook.domain.expenses import format_amount, parse_amount
from spendbook.domain.models import ALL_CATEGORIES, CategoryName, Expense
from spendbook.ledger import ExpenseStore
from spendbook.store.schema import get_db_path

console = Console()


def open_store(category: str | None = None) -> ExpenseStore:
    """Load the expense store and apply an optional category filter."""
    store = ExpenseStore.open(get_db_path())
    if category:
        store.select_category(category)
    return store


def get_settings() -> Settings:
    """Load settings, exiting with a message if the config file is broken."""
    try:
        return load_settings()
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Cannot read config file: {e}[/red]", style="bold")
        sys.exit(1)


def require_amount(text: str) -> float:
    """Parse an amount or exit without touching stored data."""
    amount = parse_amount(text)
    if amount is None:
        console.print(f"[red]Invalid amount: {escape(text)}[/red]")
        console.print("[dim]Enter a non-negative number such as 12.50[/dim]")
        sys.exit(1)
    return amount


def require_date(text: str | None) -> datetime.date:
    """Parse a date or exit without touching stored data."""
    try:
        return parse_date(text)
    except ValueError:
        console.print(f"[red]Invalid date: {escape(str(text))}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, today[/dim]")
        sys.exit(1)


def confirm_category(category: str, settings: Settings) -> bool:
    """Check a category against the configured list, asking before using an unknown one."""
    if category in settings.categories:
        return True
    console.print(f"[yellow]Category '{escape(category)}' is not one of: {', '.join(settings.categories)}[/yellow]")
    return typer.confirm("Use it anyway?", default=False)


def display_expense(expense: Expense, settings: Settings) -> None:
    """Print a single expense's details."""
    console.print(f"  Date: {format_date(expense.date)}")
    console.print(f"  Category: {escape(expense.category)}")
    console.print(f"  Amount: {format_amount(expense.amount, settings.currency_symbol)}")
    if expense.note:
        console.print(f"  Note: {escape(expense.note)}")


def add_command(
    amount: str,
    category: str | None = None,
    date: str | None = None,
    note: str = "",
) -> None:
    """Add an expense.

    Args:
        amount: Amount as typed by the user; rejected unless it parses as a number.
        category: Category name. Defaults to the configured default category.
        date: Expense date. Defaults to today.
        note: Optional note.
    """
    settings = get_settings()
    parsed_amount = require_amount(amount)
    parsed_date = require_date(date)
    category = category or settings.default_category

    if not confirm_category(category, settings):
        console.print("[dim]Expense not added[/dim]")
        return

    try:
        store = open_store()
        expense = store.add(parsed_amount, category, parsed_date, note)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Expense added:")
    display_expense(expense, settings)


def list_command(category: str | None = None) -> None:
    """List expenses with a running total."""
    settings = get_settings()

    try:
        store = open_store(category)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    expenses = store.filtered_expenses()
    if not expenses:
        console.print("[yellow]No expenses added yet![/yellow]")
        return

    title = "My Expenses"
    if store.selected_category != ALL_CATEGORIES:
        title += f" - {escape(store.selected_category)}"

    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Note", style="white")
    table.add_column("Amount", justify="right")

    for idx, expense in enumerate(expenses, 1):
        note = escape(expense.note) if expense.note else "[dim]-[/dim]"
        table.add_row(
            str(idx),
            format_date(expense.date),
            escape(expense.category),
            note,
            format_amount(expense.amount, settings.currency_symbol),
        )

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {format_amount(store.total_expenses(), settings.currency_symbol)}")


def prompt_edits(expense: Expense, settings: Settings) -> Expense:
    """Interactively prompt for each field, defaulting to the current value."""
    amount_text = typer.prompt("Amount", default=f"{expense.amount:.2f}")
    amount = require_amount(amount_text)

    console.print(f"[cyan]Categories:[/cyan] {', '.join(settings.categories)}")
    category = typer.prompt("Category", default=str(expense.category))

    date_text = typer.prompt("Date", default=expense.date.isoformat())
    date = require_date(date_text)

    note = typer.prompt("Note", default=expense.note, show_default=bool(expense.note))

    return dataclasses.replace(
        expense,
        amount=amount,
        category=CategoryName(category),
        date=date,
        note=note,
    )


def edit_command(
    position: int,
    category: str | None = None,
    amount: str | None = None,
    new_category: str | None = None,
    date: str | None = None,
    note: str | None = None,
) -> None:
    """Edit an expense by its position in the list.

    With no field options given, every field is prompted for interactively.

    Args:
        position: 1-based position as shown by 'spendbook list'.
        category: Category filter the position refers to.
        amount: New amount.
        new_category: New category.
        date: New date.
        note: New note.
    """
    settings = get_settings()

    try:
        store = open_store(category)
        try:
            expense = store.get(position - 1)
        except IndexError:
            console.print(f"[red]No expense at position {position}[/red]")
            sys.exit(1)

        if amount is None and new_category is None and date is None and note is None:
            console.print("[bold]Editing expense:[/bold]")
            display_expense(expense, settings)
            console.print()
            edited = prompt_edits(expense, settings)
        else:
            changes: dict[str, object] = {}
            if amount is not None:
                changes["amount"] = require_amount(amount)
            if new_category is not None:
                changes["category"] = CategoryName(new_category)
            if date is not None:
                changes["date"] = require_date(date)
            if note is not None:
                changes["note"] = note
            edited = dataclasses.replace(expense, **changes)

        if not confirm_category(edited.category, settings):
            console.print("[dim]Expense not updated[/dim]")
            return

        if not store.update(edited):
            console.print("[yellow]Expense no longer exists[/yellow]")
            return

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Expense updated:")
    display_expense(edited, settings)


def delete_command(
    positions: list[int],
    category: str | None = None,
    yes: bool = False,
) -> None:
    """Delete expenses by their positions in the list.

    Args:
        positions: 1-based positions as shown by 'spendbook list'.
        category: Category filter the positions refer to.
        yes: Skip the confirmation prompt.
    """
    settings = get_settings()

    try:
        store = open_store(category)
        view = store.filtered_expenses()

        invalid = [p for p in positions if not 1 <= p <= len(view)]
        if invalid:
            console.print(f"[red]Invalid position(s): {', '.join(str(p) for p in invalid)}[/red]")
            if view:
                console.print(f"[dim]Choose from 1-{len(view)}[/dim]")
            sys.exit(1)

        if not yes:
            for p in sorted(set(positions)):
                expense = view[p - 1]
                console.print(
                    f"  {p}. {format_date(expense.date)} {escape(expense.category)} "
                    f"{format_amount(expense.amount, settings.currency_symbol)} {escape(expense.note)}"
                )
            if not typer.confirm("Delete these expenses?", default=False):
                console.print("[dim]Nothing deleted[/dim]")
                return

        removed = store.delete(p - 1 for p in positions)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    noun = "expense" if len(removed) == 1 else "expenses"
    console.print(f"[green]✓[/green] Deleted {len(removed)} {noun}")
