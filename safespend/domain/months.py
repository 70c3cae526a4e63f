"""Pure functions for the month lifecycle: snapshots and locking.

A month is either open (the current month) or completed. Completed months are
locked: their expenses can no longer be added or deleted.
"""

from dataclasses import dataclass
from datetime import date, datetime

from safespend.domain.breakdown import expenses_in_month, total_spent
from safespend.domain.expenses import Expense, expense_month_key
from safespend.domain.models import Money, Month


@dataclass(frozen=True)
class MonthSnapshot:
    """Immutable record of a completed month."""

    month: Month
    income: Money
    total_spent: Money
    savings: Money  # income - total_spent, negative on overspend
    completed_at: str  # ISO timestamp


def create_month_snapshot(
    month: Month,
    income: Money,
    expenses: list[Expense],
    completed_at: datetime,
) -> MonthSnapshot:
    """Build the snapshot for a month being completed.

    Args:
        month: Month being completed (YYYY-MM).
        income: Income at completion time.
        expenses: All expenses; only the month's are counted.
        completed_at: Completion time.

    Returns:
        MonthSnapshot with spend and savings for the month.
    """
    spent = total_spent(expenses_in_month(expenses, month, completed_at.date()))
    return MonthSnapshot(
        month=month,
        income=income,
        total_spent=spent,
        savings=Money(income - spent),
        completed_at=completed_at.isoformat(),
    )


def is_month_completed(month: Month, completed_months: list[Month]) -> bool:
    return month in completed_months


def is_expense_locked(expense: Expense, completed_months: list[Month], today: date) -> bool:
    """Check whether an expense falls in a completed month."""
    return is_month_completed(expense_month_key(expense, today), completed_months)
