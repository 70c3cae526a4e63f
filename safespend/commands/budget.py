"""Budget commands for income, allocation, status and the category breakdown."""

import sys

from rich.table import Table

from safespend.commands.common import console, money_markup, open_session
from safespend.config import set_budget_config
from safespend.dates import month_label
from safespend.domain.breakdown import bucket_totals, category_totals, to_percent, total_spent
from safespend.domain.budget import BudgetConfig, calculate_allocation, validate_config
from safespend.domain.expenses import Expense, validate_amount
from safespend.domain.formatting import format_currency
from safespend.domain.models import Bucket, ExpenseCategory, Money
from safespend.domain.state import SetConfig, SetIncome

BUCKET_LABELS = {
    Bucket.FIXED_EXPENSES: "Fixed expenses",
    Bucket.PLANNED_SAVINGS: "Planned savings",
    Bucket.INVESTMENT_ALLOCATION: "Investments",
    Bucket.LIFESTYLE_BALANCE: "Lifestyle",
}


def format_usage_with_color(percentage: float) -> str:
    """Format bucket usage with color based on percentage.

    Args:
        percentage: Share of the allocation already spent.

    Returns:
        Colored string for usage display.
    """
    text = f"{percentage:.0f}%"
    if percentage > 100:
        return f"[red]{text}[/red]"
    elif percentage > 90:
        return f"[yellow]{text}[/yellow]"
    else:
        return f"[green]{text}[/green]"


def income_command(amount: str) -> None:
    """Set monthly income."""
    value, error = validate_amount(amount, allow_zero=True)
    if error or value is None:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    session = open_session()
    session.dispatch(SetIncome(value))
    console.print(f"[green]✓[/green] Monthly income set to {format_currency(value)}")
    console.print(f"[dim]Safe to spend today: {format_currency(session.budget.daily_safe_to_spend)}[/dim]")


def config_command(fixed: float | None, savings: float | None, investments: float | None, save_default: bool) -> None:
    """Show or change allocation percentages (given as whole percentages)."""
    session = open_session()
    current = session.state.config

    if fixed is None and savings is None and investments is None:
        console.print("[bold]Allocation[/bold]")
        console.print(f"  Fixed expenses: {current.fixed_expenses_percentage * 100:.0f}%")
        console.print(f"  Savings: {current.savings_percentage * 100:.0f}%")
        console.print(f"  Investments: {current.investment_percentage * 100:.0f}%")
        console.print(f"  Lifestyle (remainder): {current.lifestyle_percentage * 100:.0f}%")
        return

    config = BudgetConfig(
        fixed_expenses_percentage=fixed / 100 if fixed is not None else current.fixed_expenses_percentage,
        savings_percentage=savings / 100 if savings is not None else current.savings_percentage,
        investment_percentage=investments / 100 if investments is not None else current.investment_percentage,
    )
    valid, error = validate_config(config)
    if not valid:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    session.dispatch(SetConfig(config))
    if save_default:
        set_budget_config(config)
        console.print("[dim]Saved as default for new budgets[/dim]")

    console.print(f"[green]✓[/green] Lifestyle now gets {config.lifestyle_percentage * 100:.0f}% of income")


def status_command() -> None:
    """Show allocation, spend and what is left for the current month."""
    session = open_session()
    state = session.state
    budget = session.refresh()

    allocation = calculate_allocation(state.income, state.config)
    allocated = {
        Bucket.FIXED_EXPENSES: allocation.fixed_expenses,
        Bucket.PLANNED_SAVINGS: allocation.planned_savings,
        Bucket.INVESTMENT_ALLOCATION: allocation.investment_allocation,
        Bucket.LIFESTYLE_BALANCE: allocation.lifestyle_balance,
    }
    remaining = {
        Bucket.FIXED_EXPENSES: budget.fixed_expenses,
        Bucket.PLANNED_SAVINGS: budget.planned_savings,
        Bucket.INVESTMENT_ALLOCATION: budget.investment_allocation,
        Bucket.LIFESTYLE_BALANCE: budget.lifestyle_balance,
    }
    spent = bucket_totals(session.month_expenses())

    console.print(f"\n[bold]Budget for {month_label(state.current_month)}[/bold]")
    console.print(f"Monthly income: {format_currency(state.income)}")
    if state.carryover_balance:
        console.print(f"Carryover: {money_markup(state.carryover_balance)}")
    console.print()

    table = Table()
    table.add_column("Bucket", style="cyan")
    table.add_column("Allocated", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Left", justify="right")
    table.add_column("Used", justify="right")

    for bucket in Bucket:
        table.add_row(
            BUCKET_LABELS[bucket],
            format_currency(allocated[bucket]),
            format_currency(spent[bucket]),
            money_markup(remaining[bucket]),
            format_usage_with_color(to_percent(spent[bucket], allocated[bucket])),
        )

    console.print(table)
    console.print(f"\n[bold]Safe to spend today:[/bold] {money_markup(budget.daily_safe_to_spend)}")

    print_breakdown(session.month_expenses(), state.income)


def print_breakdown(expenses: list[Expense], income: Money) -> None:
    """Print spend per category and its share of monthly income."""
    console.print("\n[bold]Spending breakdown[/bold] [dim](% of monthly income)[/dim]")
    if total_spent(expenses) == 0:
        console.print("[dim]No spending recorded yet this month.[/dim]")
        return

    totals = category_totals(expenses)

    table = Table()
    table.add_column("Category", style="magenta")
    table.add_column("Spent", justify="right")
    table.add_column("Of income", justify="right")

    for category in ExpenseCategory:
        table.add_row(
            str(category),
            format_currency(totals[category]),
            f"{to_percent(totals[category], income):.1f}%",
        )

    console.print(table)


def breakdown_command() -> None:
    """Show spend per category for the current month."""
    session = open_session()
    console.print(f"\n[bold]{month_label(session.state.current_month)}[/bold]")
    print_breakdown(session.month_expenses(), session.state.income)
