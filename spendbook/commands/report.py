"""Chart command for viewing spending by category."""

import sqlite3
import sys

from rich.console import Console
from rich.markup import escape

from spendbook.commands.expenses import get_settings, open_store
from spendbook.domain.expenses import calculate_bar_length, format_amount
from spendbook.domain.models import ALL_CATEGORIES, CategoryName

console = Console()
SORT_ORDERS = ("alpha", "value")


def render_bar_line(
    category: CategoryName,
    amount: float,
    max_amount: float,
    bar_width: int,
    symbol: str,
) -> None:
    """Render a single category bar.

    Args:
        category: Category name.
        amount: Category total.
        max_amount: Largest category total, for scaling.
        bar_width: Width of the longest bar in characters.
        symbol: Currency symbol.
    """
    bar = "█" * calculate_bar_length(amount, max_amount, bar_width)
    amount_display = format_amount(amount, symbol)
    console.print(f"  {escape(f'{category:20}')} {amount_display:>12} [magenta]{bar}[/magenta]")


def chart_command(category: str | None = None, sort_by: str = "alpha") -> None:
    """Show a bar chart of spending per category.

    Args:
        category: Only chart this category.
        sort_by: "alpha" orders bars by category name, "value" puts the largest first.
    """
    if sort_by not in SORT_ORDERS:
        console.print(f"[red]Invalid sort order: {escape(sort_by)}[/red]")
        console.print(f"[dim]Choose one of: {', '.join(SORT_ORDERS)}[/dim]")
        sys.exit(1)

    settings = get_settings()

    try:
        store = open_store(category)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    if not store.filtered_expenses():
        console.print("[yellow]No data to display![/yellow]")
        return

    totals = store.sorted_category_totals(sort_by)

    title = "Expenses by Category"
    if store.selected_category != ALL_CATEGORIES:
        title += f" ({escape(store.selected_category)})"
    console.print(f"[bold cyan]{title}[/bold cyan]\n")

    max_amount = max(amount for _, amount in totals)
    for cat, amount in totals:
        render_bar_line(cat, amount, max_amount, settings.bar_width, settings.currency_symbol)

    total_display = format_amount(store.total_expenses(), settings.currency_symbol)
    console.print(f"\n  [bold]Total:[/bold] {total_display}")
