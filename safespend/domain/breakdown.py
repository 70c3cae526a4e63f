"""Pure functions for grouping expenses by month, bucket and category.

All monetary amounts are in rupees (Money type).
"""

import math
from datetime import date, datetime

from safespend.dates import month_key_of, parse_iso_date, parse_month_key
from safespend.domain.expenses import Expense, bucket_of, effective_date
from safespend.domain.models import Bucket, ExpenseCategory, Money


def resolve_reference_month(reference: date | str | None, today: date) -> date:
    """Resolve a month reference to a date inside that month.

    Args:
        reference: Month key (YYYY-MM), date/datetime, ISO date string, or None.
        today: Used for None and for anything that can't be parsed.

    Returns:
        A date within the referenced month.
    """
    if reference is None:
        return today
    if isinstance(reference, datetime):
        return reference.date()
    if isinstance(reference, date):
        return reference

    first = parse_month_key(reference)
    if first is not None:
        return first
    parsed = parse_iso_date(reference)
    return parsed if parsed is not None else today


def expenses_in_month(
    expenses: list[Expense],
    reference: date | str | None = None,
    today: date | None = None,
) -> list[Expense]:
    """Select expenses whose effective date falls in the reference month.

    Args:
        expenses: Expenses in any order.
        reference: Month to select (see resolve_reference_month). Defaults to today.
        today: Current date. Defaults to the system date.

    Returns:
        Matching expenses in their original order.
    """
    if today is None:
        today = date.today()
    target = month_key_of(resolve_reference_month(reference, today))

    selected: list[Expense] = []
    for expense in expenses:
        resolved = effective_date(expense)
        if resolved is not None and month_key_of(resolved) == target:
            selected.append(expense)
    return selected


def bucket_totals(expenses: list[Expense]) -> dict[Bucket, Money]:
    """Sum expense amounts per bucket; buckets without expenses are 0."""
    totals = {bucket: Money(0.0) for bucket in Bucket}
    for expense in expenses:
        bucket = bucket_of(expense.category)
        totals[bucket] = Money(totals[bucket] + expense.amount)
    return totals


def category_totals(expenses: list[Expense]) -> dict[ExpenseCategory, Money]:
    """Sum expense amounts per category; categories without expenses are 0."""
    totals = {category: Money(0.0) for category in ExpenseCategory}
    for expense in expenses:
        if expense.category in totals:
            totals[expense.category] = Money(totals[expense.category] + expense.amount)
    return totals


def total_spent(expenses: list[Expense]) -> Money:
    """Sum of all expense amounts."""
    return Money(sum(expense.amount for expense in expenses))


def to_percent(amount: float, total: float) -> float:
    """Express amount as a percentage of total.

    Returns:
        Percentage (0-100+), or 0 for non-finite inputs or a non-positive total.
    """
    if not math.isfinite(amount) or not math.isfinite(total) or total <= 0:
        return 0.0
    return (amount / total) * 100
