"""Setup and maintenance commands (init, backup, categories)."""

import sqlite3
import sys
from contextlib import closing
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console

from spendbook.commands.expenses import get_settings
from spendbook.config import Settings, get_config_path, write_settings
from spendbook.store.persistence import load_expenses
from spendbook.store.schema import database_exists, get_data_dir, get_db_path, init_database

console = Console()


def count_stored_expenses(db_path: Path) -> int:
    """Number of expenses held in a database file (0 if it does not exist)."""
    return len(load_expenses(db_path))


def copy_database(source: Path, target: Path) -> None:
    """Copy a database with SQLite's online backup, so a half-written file is never copied."""
    with closing(sqlite3.connect(source)) as src, closing(sqlite3.connect(target)) as dst:
        src.backup(dst)


def backup_command(output_dir: str | None = None) -> None:
    """Write a timestamped copy of the expense database (and settings file, if any)."""
    db_path = get_db_path()

    if not database_exists(db_path):
        console.print("[yellow]Nothing to back up: no expenses have been stored yet.[/yellow]")
        sys.exit(1)

    backup_dir = Path(output_dir).expanduser() if output_dir else get_data_dir() / "backups"
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"spendbook_{stamp}.db"

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        copy_database(db_path, db_backup)
        count = count_stored_expenses(db_backup)

        config_path = get_config_path()
        config_backup = None
        if config_path.is_file():
            config_backup = backup_dir / f"config_{stamp}.toml"
            config_backup.write_bytes(config_path.read_bytes())
    except sqlite3.Error as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)

    noun = "expense" if count == 1 else "expenses"
    console.print(f"[green]✓[/green] Backed up {count} {noun} to {db_backup}")
    if config_backup is not None:
        console.print(f"[green]✓[/green] Settings backed up to {config_backup}")


def init_command(force: bool = False, yes: bool = False) -> None:
    """Create the expense database and a settings file with the defaults.

    An existing database is only replaced with --force, and then only after
    confirming how many stored expenses will be lost.

    Args:
        force: Replace an existing database and settings file.
        yes: Skip the confirmation that --force asks for.
    """
    db_path = get_db_path()
    config_path = get_config_path()

    try:
        stored = count_stored_expenses(db_path) if database_exists(db_path) else None

        if stored is not None and not force:
            console.print(f"[yellow]Database already exists with {stored} stored expenses: {db_path}[/yellow]")
            console.print("[dim]Use 'spendbook init --force' to start over (this erases them)[/dim]")
            sys.exit(1)

        if stored is not None:
            if stored:
                console.print(f"[bold red]--force erases {stored} stored expenses in {db_path}[/bold red]")
                if not yes and not typer.confirm("Erase them?", default=False):
                    console.print("[dim]Nothing changed[/dim]")
                    return
            db_path.unlink()

        init_database(db_path)
        console.print(f"[green]✓[/green] Database ready: {db_path}")

        if force or not config_path.exists():
            write_settings(Settings(), config_path)
            console.print(f"[green]✓[/green] Settings written: {config_path} (permissions: 600)")
        else:
            console.print(f"[dim]Keeping existing settings: {config_path}[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def categories_command() -> None:
    """List the categories offered when adding or editing expenses."""
    settings = get_settings()
    for idx, category in enumerate(settings.categories, 1):
        marker = " [dim](default)[/dim]" if category == settings.default_category else ""
        console.print(f"  {idx}. {category}{marker}")
