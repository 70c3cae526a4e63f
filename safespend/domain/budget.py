"""Pure functions for budget calculations.

This module contains the functional core for budget operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in rupees (Money type).
"""

from dataclasses import dataclass
from datetime import date

from safespend.dates import remaining_days_in_month
from safespend.domain.breakdown import bucket_totals
from safespend.domain.expenses import Expense
from safespend.domain.models import Bucket, Money


@dataclass(frozen=True)
class BudgetConfig:
    """Immutable allocation fractions; lifestyle gets whatever is left."""

    fixed_expenses_percentage: float
    savings_percentage: float
    investment_percentage: float

    @property
    def lifestyle_percentage(self) -> float:
        return 1 - self.fixed_expenses_percentage - self.savings_percentage - self.investment_percentage


DEFAULT_BUDGET_CONFIG = BudgetConfig(
    fixed_expenses_percentage=0.5,
    savings_percentage=0.15,
    investment_percentage=0.05,
)


@dataclass(frozen=True)
class BudgetAllocation:
    """Immutable split of income across the four buckets."""

    fixed_expenses: Money
    planned_savings: Money
    investment_allocation: Money
    lifestyle_balance: Money


@dataclass(frozen=True)
class Budget:
    """Immutable budget for a month. Bucket fields hold what is left to spend."""

    monthly_income: Money
    fixed_expenses: Money
    planned_savings: Money
    investment_allocation: Money
    lifestyle_balance: Money
    daily_safe_to_spend: Money


def validate_config(config: BudgetConfig) -> tuple[bool, str | None]:
    """Validate allocation fractions.

    Returns:
        Tuple of (is_valid, error_message).
    """
    fractions = {
        "Fixed expenses": config.fixed_expenses_percentage,
        "Savings": config.savings_percentage,
        "Investments": config.investment_percentage,
    }
    for label, fraction in fractions.items():
        if not 0 <= fraction <= 1:
            return False, f"{label} percentage must be between 0 and 1"

    # Small tolerance so 0.1 + 0.2 + 0.7 style inputs are accepted
    if sum(fractions.values()) > 1 + 1e-9:
        return False, "Percentages can't add up to more than 100%"

    return True, None


def calculate_allocation(income: Money, config: BudgetConfig) -> BudgetAllocation:
    """Split income across buckets.

    Lifestyle is the residual, so the four buckets always sum to income.
    """
    fixed = Money(income * config.fixed_expenses_percentage)
    savings = Money(income * config.savings_percentage)
    invest = Money(income * config.investment_percentage)
    lifestyle = Money(income - fixed - savings - invest)

    return BudgetAllocation(
        fixed_expenses=fixed,
        planned_savings=savings,
        investment_allocation=invest,
        lifestyle_balance=lifestyle,
    )


def calculate_budget(
    income: Money,
    config: BudgetConfig,
    month_expenses: list[Expense],
    carryover_balance: Money,
    today: date,
) -> Budget:
    """Calculate what is left in each bucket and the daily safe-to-spend.

    Args:
        income: Monthly income in rupees. Not validated.
        config: Allocation fractions.
        month_expenses: Expenses already filtered to the budget's month.
        carryover_balance: Savings/deficit rolled from completed months.
        today: Wall-clock date used for the remaining days in the month.

    Returns:
        Budget with remaining amounts. Negative values mean overspend.
    """
    allocation = calculate_allocation(income, config)
    spent = bucket_totals(month_expenses)

    # Carryover only ever feeds the lifestyle bucket
    lifestyle = Money(allocation.lifestyle_balance - spent[Bucket.LIFESTYLE_BALANCE] + carryover_balance)

    return Budget(
        monthly_income=income,
        fixed_expenses=Money(allocation.fixed_expenses - spent[Bucket.FIXED_EXPENSES]),
        planned_savings=Money(allocation.planned_savings - spent[Bucket.PLANNED_SAVINGS]),
        investment_allocation=Money(allocation.investment_allocation - spent[Bucket.INVESTMENT_ALLOCATION]),
        lifestyle_balance=lifestyle,
        daily_safe_to_spend=Money(lifestyle / remaining_days_in_month(today)),
    )
