"""CLI entry point for safespend."""

import typer

from safespend.commands.admin import backup_command, goal_command, init_command, reset_command
from safespend.commands.budget import breakdown_command, config_command, income_command, status_command
from safespend.commands.common import configure_logging
from safespend.commands.expenses import add_command, delete_command, list_command
from safespend.commands.months import complete_command, history_command, insights_command

app = typer.Typer(
    name="safespend",
    help="Split your income into buckets and know what is safe to spend today",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Split your income into buckets and know what is safe to spend today."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize safespend database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.safespend/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="reset")
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Clear all your stored data."""
    reset_command(yes)


@app.command()
def income(amount: str) -> None:
    """Set your monthly income (in ₹)."""
    income_command(amount)


@app.command(name="config")
def config(
    fixed: float = typer.Option(None, "--fixed", help="Fixed expenses share of income (%)"),
    savings: float = typer.Option(None, "--savings", help="Savings share of income (%)"),
    investments: float = typer.Option(None, "--investments", help="Investments share of income (%)"),
    save_default: bool = typer.Option(False, "--save-default", help="Also use these shares for new budgets"),
) -> None:
    """Show or change how your income is split. Lifestyle gets the rest."""
    config_command(fixed, savings, investments, save_default)


@app.command()
def add(
    amount: str,
    description: str,
    category: str = typer.Option("Lifestyle", "--category", "-c", help="Fixed Expenses, Savings, Investments, Lifestyle or Other"),
    date: str = typer.Option(None, "--date", "-d", help="Transaction date (default: today)"),
) -> None:
    """Log an expense."""
    add_command(amount, description, category, date)


@app.command()
def delete(expense_id: str) -> None:
    """Delete an expense by ID."""
    delete_command(expense_id)


@app.command(name="list")
def list_expenses(
    limit: int = typer.Option(50, help="Maximum expenses to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your expenses"),
) -> None:
    """List your expenses."""
    list_command(limit, all)


@app.command()
def status() -> None:
    """Show your budget and safe-to-spend for the current month."""
    status_command()


@app.command()
def breakdown() -> None:
    """Show spending per category as a share of income."""
    breakdown_command()


@app.command()
def insights() -> None:
    """Show insights about your spending."""
    insights_command()


@app.command()
def complete(
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Complete the current month and roll its savings forward."""
    complete_command(yes)


@app.command()
def history(
    limit: int = typer.Option(12, help="Maximum months to show"),
) -> None:
    """Show your completed months."""
    history_command(limit)


@app.command()
def goal(
    name: str = typer.Option(None, "--name", help="Goal name"),
    cost: str = typer.Option(None, "--cost", help="Total cost (in ₹)"),
    months: str = typer.Option(None, "--months", help="Months to reach the goal"),
) -> None:
    """Check whether a savings goal fits your lifestyle surplus."""
    goal_command(name, cost, months)


if __name__ == "__main__":
    app()
