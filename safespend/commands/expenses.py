"""Expense commands (add, delete, list)."""

import sys
from datetime import datetime

from rich.table import Table

from safespend.commands.common import console, money_markup, normalize_date, open_session
from safespend.dates import month_label
from safespend.domain.expenses import build_expense, expense_month_key, sort_by_recent
from safespend.domain.formatting import format_currency
from safespend.domain.months import is_expense_locked
from safespend.domain.state import AddExpense, DeleteExpense, find_expense


def add_command(
    amount: str,
    description: str,
    category: str = "Lifestyle",
    date: str | None = None,
) -> None:
    """Log an expense.

    Args:
        amount: Amount in rupees as typed.
        description: Short description.
        category: Category name (Fixed Expenses, Savings, Investments, Lifestyle, Other).
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, ...). Defaults to today.
    """
    try:
        normalized_date = normalize_date(date)
    except (ValueError, OverflowError) as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    expense, error = build_expense(amount, description, category, normalized_date, datetime.now())
    if error or expense is None:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    session = open_session()
    error = session.dispatch(AddExpense(expense))
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    console.print("[green]✓[/green] Expense added:")
    console.print(f"  Date: {expense.date}")
    console.print(f"  Description: {expense.description}")
    console.print(f"  Amount: {format_currency(expense.amount)}")
    console.print(f"  Category: {expense.category}")
    console.print(f"[dim]Lifestyle balance now {format_currency(session.budget.lifestyle_balance)}[/dim]")


def delete_command(expense_id: str) -> None:
    """Delete an expense by ID (from 'safespend list')."""
    session = open_session()
    expense = find_expense(session.state, expense_id)
    if expense is None:
        console.print(f"[red]Expense {expense_id} not found[/red]")
        sys.exit(1)

    error = session.dispatch(DeleteExpense(expense_id))
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted: {expense.description} ({format_currency(expense.amount)})")


def list_command(limit: int = 50, all: bool = False) -> None:
    """List expenses, newest first."""
    session = open_session()
    today = session.clock().date()
    expenses = sort_by_recent(session.state.expenses)

    if not expenses:
        console.print("[yellow]No expenses found[/yellow]")
        return

    shown = expenses if all else expenses[:limit]
    table = Table(title=f"Expenses (showing {len(shown)} of {len(expenses)})")
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")
    table.add_column("Month", style="dim")

    for expense in shown:
        locked = is_expense_locked(expense, session.state.completed_months, today)
        month = month_label(expense_month_key(expense, today))
        table.add_row(
            expense.id,
            expense.date,
            expense.description,
            str(expense.category),
            money_markup(expense.amount),
            f"{month} 🔒" if locked else month,
        )

    console.print(table)
