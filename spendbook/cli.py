"""CLI entry point for spendbook."""

import typer

from spendbook.commands.admin import backup_command, categories_command, init_command
from spendbook.commands.expenses import add_command, delete_command, edit_command, list_command
from spendbook.commands.report import chart_command

app = typer.Typer(
    name="spendbook",
    help="Spendbook - record your expenses and see where the money goes",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Spendbook - record your expenses and see where the money goes."""
    pass


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: the data directory's backups folder)"),
) -> None:
    """Copy your stored expenses and settings to a backup folder."""
    backup_command(output_dir)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Erase stored expenses and reset settings"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask before erasing with --force"),
) -> None:
    """Create the expense database and a default settings file."""
    init_command(force, yes)


@app.command()
def add(
    amount: str = typer.Argument(..., help="Amount spent (e.g. 12.50)"),
    category: str = typer.Option(None, "--category", "-c", help="Category (default from config)"),
    date: str = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, DD/MM/YYYY; default: today)"),
    note: str = typer.Option("", "--note", "-n", help="Note"),
) -> None:
    """Add an expense."""
    add_command(amount, category, date, note)


@app.command(name="list")
def list_expenses(
    category: str = typer.Option(None, "--category", "-c", help="Only show this category"),
) -> None:
    """List your expenses with their total."""
    list_command(category)


@app.command()
def edit(
    position: int = typer.Argument(..., help="Position shown by 'spendbook list'"),
    category: str = typer.Option(None, "--category", "-c", help="Category filter the position refers to"),
    amount: str = typer.Option(None, "--amount", help="New amount"),
    new_category: str = typer.Option(None, "--set-category", help="New category"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
    note: str = typer.Option(None, "--note", "-n", help="New note"),
) -> None:
    """Edit an expense (prompts for each field when no options are given)."""
    edit_command(position, category, amount, new_category, date, note)


@app.command()
def delete(
    positions: list[int] = typer.Argument(..., help="Positions shown by 'spendbook list'"),
    category: str = typer.Option(None, "--category", "-c", help="Category filter the positions refer to"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete expenses by their list positions."""
    delete_command(positions, category, yes)


@app.command()
def chart(
    category: str = typer.Option(None, "--category", "-c", help="Only chart this category"),
    sort_by: str = typer.Option("alpha", "--sort", "-s", help="Sort by 'alpha' (category name) or 'value' (largest first)"),
) -> None:
    """Show a bar chart of your spending by category."""
    chart_command(category, sort_by)


@app.command()
def categories() -> None:
    """List the available expense categories."""
    categories_command()


if __name__ == "__main__":
    app()
