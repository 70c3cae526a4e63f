"""Admin commands for backup, init, reset and the goal calculator."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

import typer

from safespend.commands.common import console, money_markup, open_session, resolve_db_path
from safespend.config import create_default_config, get_config_path
from safespend.domain.formatting import format_currency
from safespend.domain.goals import GoalInputs
from safespend.store.schema import init_database


def backup_command(output_dir: str | None = None) -> None:
    """Backup database and configuration files."""
    db_path = resolve_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        console.print("[red]Database not found. Run 'safespend init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".safespend" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        db_backup = backup_dir / f"safespend_{timestamp}.db"
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def init_command(force: bool = False) -> None:
    """Initialize safespend database and configuration."""
    db_path = resolve_db_path()
    config_path = get_config_path()

    try:
        # Guard: refuse to overwrite config without force flag
        if config_path.exists() and not force:
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            console.print("[yellow]Use 'safespend init --force' to overwrite[/yellow]")
        else:
            console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
            create_default_config(config_path)
            console.print("[green]✓[/green] Config file created (permissions: 600)")

        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database initialized")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def reset_command(yes: bool = False) -> None:
    """Clear all stored data and start over."""
    if not yes:
        confirmed = typer.confirm("Reset the app? This clears all stored data and cannot be undone.")
        if not confirmed:
            console.print("[dim]Cancelled[/dim]")
            return

    session = open_session()
    session.reset()
    console.print("[green]✓[/green] All data cleared")


def goal_command(name: str | None, cost: str | None, months: str | None) -> None:
    """Show the savings goal, updating any inputs given."""
    session = open_session()
    saved = session.load_goal()

    goal = GoalInputs(
        goal_name=name if name is not None else saved.goal_name,
        total_cost=cost if cost is not None else saved.total_cost,
        target_months=months if months is not None else saved.target_months,
    )
    if goal != saved:
        session.save_goal(goal)

    progress = session.goal_progress(goal)
    style = "green" if progress.on_track else "yellow"

    console.print(f"\n[bold]{goal.goal_name or 'Savings goal'}[/bold]")
    console.print(f"  Required per month: {format_currency(progress.required_monthly)}")
    console.print(f"  Monthly surplus: {format_currency(progress.monthly_surplus)}")
    console.print(f"  Buffer after goal: {money_markup(progress.remaining_buffer)}")
    console.print(f"[{style}]{progress.status}[/{style}]")
