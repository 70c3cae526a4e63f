"""Application state aggregate and its transition function.

Everything the app stores lives in one immutable AppState. Mutations are
expressed as actions and applied by ``apply_action``, which returns a new
state with the derived budget recomputed. Refused transitions return the
state unchanged; ``rejection_reason`` explains why to the caller.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any

from safespend.dates import month_key_of, month_label, next_month_key
from safespend.domain.breakdown import expenses_in_month
from safespend.domain.budget import (
    DEFAULT_BUDGET_CONFIG,
    Budget,
    BudgetConfig,
    calculate_budget,
    validate_config,
)
from safespend.domain.expenses import Expense, expense_month_key
from safespend.domain.models import ExpenseCategory, Money, Month
from safespend.domain.months import (
    MonthSnapshot,
    create_month_snapshot,
    is_expense_locked,
    is_month_completed,
)


@dataclass(frozen=True)
class AppState:
    """Immutable application state. ``budget`` is derived, never stored."""

    income: Money
    config: BudgetConfig
    budget: Budget
    current_month: Month
    expenses: list[Expense] = field(default_factory=list)  # newest first
    completed_months: list[Month] = field(default_factory=list)
    snapshots: list[MonthSnapshot] = field(default_factory=list)  # newest first
    carryover_balance: Money = Money(0.0)


@dataclass(frozen=True)
class SetIncome:
    income: Money


@dataclass(frozen=True)
class SetConfig:
    config: BudgetConfig


@dataclass(frozen=True)
class AddExpense:
    expense: Expense


@dataclass(frozen=True)
class DeleteExpense:
    expense_id: str


@dataclass(frozen=True)
class RecalculateBudget:
    """Refresh date-dependent figures without changing stored data."""


@dataclass(frozen=True)
class CompleteMonth:
    """Lock the current month and move to the next one.

    ``month`` pins the month the caller meant to complete, so repeating the
    action (e.g. a double submit) can't also complete the following month.
    """

    month: Month | None = None


@dataclass(frozen=True)
class ResetApp:
    """Return to the empty default state."""

    config: BudgetConfig = DEFAULT_BUDGET_CONFIG


Action = SetIncome | SetConfig | AddExpense | DeleteExpense | RecalculateBudget | CompleteMonth | ResetApp


def recalculate_budget(state: AppState, today: date) -> AppState:
    """Recompute the derived budget for the state's current month."""
    monthly = expenses_in_month(state.expenses, state.current_month, today)
    budget = calculate_budget(state.income, state.config, monthly, state.carryover_balance, today)
    return replace(state, budget=budget)


def default_state(today: date, config: BudgetConfig = DEFAULT_BUDGET_CONFIG) -> AppState:
    """Empty state: no income, no expenses, today's month open, no history."""
    income = Money(0.0)
    return AppState(
        income=income,
        config=config,
        budget=calculate_budget(income, config, [], Money(0.0), today),
        current_month=month_key_of(today),
    )


def find_expense(state: AppState, expense_id: str) -> Expense | None:
    return next((e for e in state.expenses if e.id == expense_id), None)


def rejection_reason(state: AppState, action: Action, today: date) -> str | None:
    """Explain why ``action`` would be refused, or None if it is allowed.

    Args:
        state: Current state.
        action: Action about to be applied.
        today: Current date, used for expenses without a usable date.

    Returns:
        Validation message for the caller, or None.
    """
    if isinstance(action, AddExpense):
        month = expense_month_key(action.expense, today)
        if is_month_completed(month, state.completed_months):
            return f"{month_label(month)} is completed; its transactions are locked."

    elif isinstance(action, DeleteExpense):
        expense = find_expense(state, action.expense_id)
        if expense is not None and is_expense_locked(expense, state.completed_months, today):
            month = expense_month_key(expense, today)
            return f"{month_label(month)} is completed; its transactions are locked."

    elif isinstance(action, CompleteMonth):
        target = action.month or state.current_month
        if is_month_completed(target, state.completed_months):
            return f"{month_label(target)} is already completed."
        if target != state.current_month:
            return f"{month_label(target)} is not the current month."

    elif isinstance(action, SetConfig):
        _, error = validate_config(action.config)
        return error

    return None


def apply_action(state: AppState, action: Action, now: datetime) -> AppState:
    """Apply one action and return the new state.

    Args:
        state: Current state. Never modified.
        action: Transition to apply.
        now: Current time; also stamps snapshots.

    Returns:
        New state, or ``state`` itself when the transition is refused.

    Raises:
        TypeError: If the action kind is not recognised.
    """
    today = now.date()

    if isinstance(action, SetIncome):
        return recalculate_budget(replace(state, income=action.income), today)

    if isinstance(action, SetConfig):
        valid, _ = validate_config(action.config)
        if not valid:
            return state
        return recalculate_budget(replace(state, config=action.config), today)

    if isinstance(action, AddExpense):
        if rejection_reason(state, action, today):
            return state
        expenses = [action.expense, *state.expenses]
        return recalculate_budget(replace(state, expenses=expenses), today)

    if isinstance(action, DeleteExpense):
        if rejection_reason(state, action, today):
            return state
        expenses = [e for e in state.expenses if e.id != action.expense_id]
        return recalculate_budget(replace(state, expenses=expenses), today)

    if isinstance(action, RecalculateBudget):
        return recalculate_budget(state, today)

    if isinstance(action, CompleteMonth):
        if rejection_reason(state, action, today):
            return state

        snapshot = create_month_snapshot(state.current_month, state.income, state.expenses, now)
        completed = replace(
            state,
            current_month=next_month_key(state.current_month, today),
            completed_months=[*state.completed_months, state.current_month],
            snapshots=[snapshot, *state.snapshots],
            carryover_balance=Money(state.carryover_balance + snapshot.savings),
        )
        return recalculate_budget(completed, today)

    if isinstance(action, ResetApp):
        return default_state(today, action.config)

    raise TypeError(f"Unhandled action type: {type(action).__name__}")


def _expense_to_record(expense: Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "amount": expense.amount,
        "description": expense.description,
        "category": str(expense.category),
        "date": expense.date,
        "createdAt": expense.created_at,
    }


def _expense_from_record(record: dict[str, Any]) -> Expense | None:
    try:
        category_raw = record.get("category", ExpenseCategory.OTHER)
        try:
            category = ExpenseCategory(category_raw)
        except ValueError:
            category = ExpenseCategory.OTHER
        return Expense(
            id=str(record["id"]),
            amount=Money(float(record["amount"])),
            description=str(record.get("description", "")),
            category=category,
            date=str(record.get("date") or ""),
            created_at=str(record.get("createdAt") or ""),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def _snapshot_to_record(snapshot: MonthSnapshot) -> dict[str, Any]:
    return {
        "month": snapshot.month,
        "income": snapshot.income,
        "totalSpent": snapshot.total_spent,
        "savings": snapshot.savings,
        "completedAt": snapshot.completed_at,
    }


def _snapshot_from_record(record: dict[str, Any]) -> MonthSnapshot | None:
    try:
        return MonthSnapshot(
            month=Month(str(record["month"])),
            income=Money(float(record["income"])),
            total_spent=Money(float(record["totalSpent"])),
            savings=Money(float(record["savings"])),
            completed_at=str(record.get("completedAt", "")),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def config_to_record(config: BudgetConfig) -> dict[str, float]:
    return {
        "fixedExpensesPercentage": config.fixed_expenses_percentage,
        "savingsPercentage": config.savings_percentage,
        "investmentPercentage": config.investment_percentage,
    }


def config_from_record(record: dict[str, Any] | None, default: BudgetConfig) -> BudgetConfig:
    """Read a config record, falling back to ``default`` for missing or invalid values."""
    if not isinstance(record, dict):
        return default
    try:
        config = BudgetConfig(
            fixed_expenses_percentage=float(record.get("fixedExpensesPercentage", default.fixed_expenses_percentage)),
            savings_percentage=float(record.get("savingsPercentage", default.savings_percentage)),
            investment_percentage=float(record.get("investmentPercentage", default.investment_percentage)),
        )
    except (TypeError, ValueError):
        return default
    valid, _ = validate_config(config)
    return config if valid else default


def _list_field(record: dict[str, Any], key: str) -> list[Any]:
    value = record.get(key)
    return value if isinstance(value, list) else []


def state_to_record(state: AppState) -> dict[str, Any]:
    """Serialise the state for storage. The derived budget is left out."""
    return {
        "income": state.income,
        "config": config_to_record(state.config),
        "expenses": [_expense_to_record(e) for e in state.expenses],
        "currentMonth": state.current_month,
        "completedMonths": list(state.completed_months),
        "snapshots": [_snapshot_to_record(s) for s in state.snapshots],
        "carryoverBalance": state.carryover_balance,
    }


def state_from_record(
    record: dict[str, Any] | None,
    today: date,
    default_config: BudgetConfig = DEFAULT_BUDGET_CONFIG,
) -> AppState:
    """Rebuild state from a stored record.

    Missing or malformed fields take their default values and the budget is
    always recomputed for ``today``.
    """
    defaults = default_state(today, default_config)
    if not isinstance(record, dict):
        return defaults

    try:
        income = Money(float(record.get("income", defaults.income)))
    except (TypeError, ValueError):
        income = defaults.income

    try:
        carryover = Money(float(record.get("carryoverBalance", defaults.carryover_balance)))
    except (TypeError, ValueError):
        carryover = defaults.carryover_balance

    expenses = [e for e in map(_expense_from_record, _list_field(record, "expenses")) if e is not None]
    snapshots = [s for s in map(_snapshot_from_record, _list_field(record, "snapshots")) if s is not None]
    completed = [Month(str(m)) for m in _list_field(record, "completedMonths")]

    state = AppState(
        income=income,
        config=config_from_record(record.get("config"), defaults.config),
        budget=defaults.budget,
        current_month=Month(str(record.get("currentMonth") or defaults.current_month)),
        expenses=expenses,
        completed_months=completed,
        snapshots=snapshots,
        carryover_balance=carryover,
    )
    return recalculate_budget(state, today)
