"""Pure functions deriving rule-based insights from income and spending.

Each insight is computed independently; the list always has the same four
entries in the same order. Degenerate inputs (no income, no expenses) produce
neutral messages rather than errors.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum

from safespend.domain.breakdown import bucket_totals, expenses_in_month, total_spent
from safespend.domain.budget import BudgetConfig, calculate_allocation
from safespend.domain.expenses import Expense, bucket_of, effective_date
from safespend.domain.models import Bucket, Money

DAYS_IN_WEEK = 7
RENT_THRESHOLD = 0.3
TREND_THRESHOLD = 0.15
HEALTHY_LIFESTYLE_BUFFER = 0.35


class InsightTone(StrEnum):
    NEUTRAL = "neutral"
    WARNING = "warning"
    POSITIVE = "positive"


@dataclass(frozen=True)
class Insight:
    """Immutable advisory message."""

    id: str
    title: str
    message: str
    tone: InsightTone


def round_percent(ratio: float) -> int:
    """Round a ratio to a whole percentage, halves rounding up."""
    return math.floor(ratio * 100 + 0.5)


def sum_in_range(expenses: list[Expense], start: date, end: date) -> Money:
    """Sum expenses whose effective date is within [start, end]."""
    total = 0.0
    for expense in expenses:
        resolved = effective_date(expense)
        if resolved is not None and start <= resolved <= end:
            total += expense.amount
    return Money(total)


def weekly_trend(expenses: list[Expense], today: date) -> float:
    """Relative change of the last 7 days' spend versus the 7 days before.

    Returns:
        (current - previous) / previous. When the previous week is empty the
        trend is 1.0 if anything was spent this week, else 0.0.
    """
    start_current = today - timedelta(days=DAYS_IN_WEEK - 1)
    end_previous = start_current - timedelta(days=1)
    start_previous = end_previous - timedelta(days=DAYS_IN_WEEK - 1)

    current_total = sum_in_range(expenses, start_current, today)
    previous_total = sum_in_range(expenses, start_previous, end_previous)

    if previous_total <= 0:
        return 1.0 if current_total > 0 else 0.0

    return (current_total - previous_total) / previous_total


def rent_insight(income: Money, fixed_spent: Money) -> Insight:
    over = income > 0 and fixed_spent > income * RENT_THRESHOLD
    if over:
        message = (
            f"Fixed expenses are {round_percent(fixed_spent / income)}% of income, "
            "which is above the 30% rent threshold."
        )
    else:
        message = "Fixed expenses remain within the 30% rent guideline."

    return Insight(
        id="rent-threshold",
        title="Rent vs income",
        message=message,
        tone=InsightTone.WARNING if over else InsightTone.NEUTRAL,
    )


def trend_insight(trend: float) -> Insight:
    if trend > TREND_THRESHOLD:
        message, tone = "Lifestyle spending is trending upward versus the prior week.", InsightTone.WARNING
    elif trend < -TREND_THRESHOLD:
        message, tone = "Lifestyle spending is easing compared to the prior week.", InsightTone.POSITIVE
    else:
        message, tone = "Lifestyle spending is stable week-over-week.", InsightTone.NEUTRAL

    return Insight(id="lifestyle-trend", title="Lifestyle spending trend", message=message, tone=tone)


def projected_savings_insight(income: Money, projected_savings: Money) -> Insight:
    if income <= 0:
        message, tone = "Set income to project monthly savings.", InsightTone.NEUTRAL
    else:
        message = f"{round_percent(projected_savings / income)}% of income remains for savings this month."
        tone = InsightTone.POSITIVE if projected_savings > 0 else InsightTone.WARNING

    return Insight(id="projected-savings", title="Projected monthly savings", message=message, tone=tone)


def budget_health_insight(
    income: Money,
    lifestyle_allocated: Money,
    lifestyle_remaining: Money,
    spent: Money,
) -> Insight:
    if income <= 0:
        message, tone = "Add your income to evaluate overall budget health.", InsightTone.NEUTRAL
    elif lifestyle_remaining < 0:
        message, tone = "Lifestyle spending is running over the planned allocation.", InsightTone.WARNING
    elif spent == 0 or lifestyle_remaining > lifestyle_allocated * HEALTHY_LIFESTYLE_BUFFER:
        message, tone = "Spending is comfortably within the monthly plan.", InsightTone.POSITIVE
    else:
        message, tone = "Spending is close to plan. Monitor remaining lifestyle buffer.", InsightTone.NEUTRAL

    return Insight(id="budget-health", title="Budget health status", message=message, tone=tone)


def generate_insights(
    income: Money,
    config: BudgetConfig,
    expenses: list[Expense],
    reference_month: date | str | None = None,
    today: date | None = None,
) -> list[Insight]:
    """Derive the advisory insights for a month.

    Args:
        income: Monthly income in rupees.
        config: Allocation fractions.
        expenses: All expenses; filtered to the reference month here.
        reference_month: Month to evaluate. Defaults to today's month.
        today: Current date, anchoring the weekly trend window.

    Returns:
        Insights in fixed order: rent threshold, lifestyle trend,
        projected savings, budget health.
    """
    if today is None:
        today = date.today()
    reference = reference_month if reference_month is not None else today

    monthly = expenses_in_month(expenses, reference, today)
    lifestyle_expenses = [e for e in monthly if bucket_of(e.category) == Bucket.LIFESTYLE_BALANCE]
    spent = bucket_totals(monthly)
    allocation = calculate_allocation(income, config)

    projected_savings = Money(max(allocation.planned_savings - spent[Bucket.PLANNED_SAVINGS], 0))
    lifestyle_remaining = Money(allocation.lifestyle_balance - spent[Bucket.LIFESTYLE_BALANCE])

    return [
        rent_insight(income, spent[Bucket.FIXED_EXPENSES]),
        trend_insight(weekly_trend(lifestyle_expenses, today)),
        projected_savings_insight(income, projected_savings),
        budget_health_insight(income, allocation.lifestyle_balance, lifestyle_remaining, total_spent(monthly)),
    ]
