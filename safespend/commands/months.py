"""Month lifecycle commands (complete, history) and insights."""

import sys

import typer
from rich.table import Table

from safespend.commands.common import console, money_markup, open_session
from safespend.dates import month_label, next_month_key
from safespend.domain.breakdown import total_spent
from safespend.domain.formatting import format_currency
from safespend.domain.insights import InsightTone
from safespend.domain.state import CompleteMonth

TONE_STYLES = {
    InsightTone.NEUTRAL: "white",
    InsightTone.WARNING: "yellow",
    InsightTone.POSITIVE: "green",
}


def complete_command(yes: bool = False) -> None:
    """Complete the current month, locking its expenses."""
    session = open_session()
    state = session.state
    today = session.clock().date()

    spent = total_spent(session.month_expenses())
    next_month = next_month_key(state.current_month, today)
    console.print(f"[bold]{month_label(state.current_month)}[/bold]")
    console.print(f"  Income: {format_currency(state.income)}")
    console.print(f"  Spent: {format_currency(spent)}")
    console.print(f"  Savings: {money_markup(state.income - spent)}")

    if not yes:
        confirmed = typer.confirm(
            f"Complete {month_label(state.current_month)}? "
            f"This will lock transactions and move to {month_label(next_month)}."
        )
        if not confirmed:
            console.print("[dim]Cancelled[/dim]")
            return

    error = session.dispatch(CompleteMonth(state.current_month))
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    snapshot = session.state.snapshots[0]
    console.print(f"[green]✓[/green] Completed {month_label(snapshot.month)}")
    console.print(f"[dim]Carryover balance: {format_currency(session.state.carryover_balance)}[/dim]")
    console.print(f"[dim]Now budgeting {month_label(session.state.current_month)}[/dim]")


def history_command(limit: int = 12) -> None:
    """Show completed month snapshots, newest first."""
    session = open_session()
    snapshots = session.state.snapshots

    if not snapshots:
        console.print("[yellow]No completed months yet[/yellow]")
        return

    table = Table(title="Completed months")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Saved", justify="right")
    table.add_column("Completed", style="dim")

    for snapshot in snapshots[:limit]:
        table.add_row(
            month_label(snapshot.month),
            format_currency(snapshot.income),
            format_currency(snapshot.total_spent),
            money_markup(snapshot.savings),
            snapshot.completed_at[:10],
        )

    console.print(table)
    console.print(f"\nCarryover balance: {money_markup(session.state.carryover_balance)}")


def insights_command() -> None:
    """Show rule-based insights for the current month."""
    session = open_session()
    console.print(f"\n[bold]Insights for {month_label(session.state.current_month)}[/bold]\n")
    for insight in session.insights():
        style = TONE_STYLES[insight.tone]
        console.print(f"[{style}]● {insight.title}[/{style}]")
        console.print(f"  {insight.message}")
