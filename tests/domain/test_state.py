"""Tests for safespend.domain.state transitions."""

from dataclasses import dataclass, replace
from datetime import datetime

import pytest

from safespend.domain.budget import DEFAULT_BUDGET_CONFIG, BudgetConfig
from safespend.domain.expenses import Expense
from safespend.domain.models import ExpenseCategory, Money, Month
from safespend.domain.state import (
    AddExpense,
    AppState,
    CompleteMonth,
    DeleteExpense,
    RecalculateBudget,
    ResetApp,
    SetConfig,
    SetIncome,
    apply_action,
    default_state,
    rejection_reason,
    state_from_record,
    state_to_record,
)

NOW = datetime(2024, 1, 20, 12, 0)  # 12 days left in January, counting today


def make_expense(expense_id: str, amount: float, category: ExpenseCategory, day: str) -> Expense:
    return Expense(
        id=expense_id,
        amount=Money(amount),
        description=expense_id,
        category=category,
        date=day,
        created_at=f"{day}T10:00:00",
    )


def with_income(income: float) -> AppState:
    return apply_action(default_state(NOW.date()), SetIncome(Money(income)), NOW)


class TestDefaultState:
    """Tests for default_state."""

    def test_empty_defaults(self) -> None:
        """Should start with no income, no expenses and today's month."""
        state = default_state(NOW.date())

        assert state.income == 0
        assert state.config == DEFAULT_BUDGET_CONFIG
        assert state.current_month == "2024-01"
        assert state.expenses == []
        assert state.completed_months == []
        assert state.snapshots == []
        assert state.carryover_balance == 0
        assert state.budget.lifestyle_balance == 0


class TestIncomeAndConfig:
    """Tests for SetIncome and SetConfig."""

    def test_set_income_recomputes_budget(self) -> None:
        """Should recompute the budget after setting income."""
        state = with_income(50000)

        assert state.income == 50000
        assert state.budget.lifestyle_balance == pytest.approx(15000)
        assert state.budget.daily_safe_to_spend == pytest.approx(15000 / 12)

    def test_set_config(self) -> None:
        """Should apply a valid config and recompute."""
        config = BudgetConfig(fixed_expenses_percentage=0.4, savings_percentage=0.2, investment_percentage=0.1)
        state = apply_action(with_income(50000), SetConfig(config), NOW)

        assert state.config == config
        assert state.budget.lifestyle_balance == pytest.approx(15000)
        assert state.budget.fixed_expenses == pytest.approx(20000)

    def test_invalid_config_is_refused(self) -> None:
        """Should keep the state when the config is invalid."""
        state = with_income(50000)
        config = BudgetConfig(fixed_expenses_percentage=0.9, savings_percentage=0.2, investment_percentage=0.1)

        assert rejection_reason(state, SetConfig(config), NOW.date()) is not None
        assert apply_action(state, SetConfig(config), NOW) is state


class TestExpenses:
    """Tests for AddExpense and DeleteExpense."""

    def test_add_puts_newest_first_and_recomputes(self) -> None:
        """Should prepend the expense and update the budget."""
        state = with_income(50000)
        first = make_expense("a", 1000, ExpenseCategory.LIFESTYLE, "2024-01-03")
        second = make_expense("b", 2000, ExpenseCategory.LIFESTYLE, "2024-01-04")

        state = apply_action(state, AddExpense(first), NOW)
        state = apply_action(state, AddExpense(second), NOW)

        assert [e.id for e in state.expenses] == ["b", "a"]
        assert state.budget.lifestyle_balance == pytest.approx(12000)

    def test_expense_in_other_month_does_not_touch_budget(self) -> None:
        """Should leave the budget alone for other months' expenses."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 1000, ExpenseCategory.LIFESTYLE, "2023-12-31")), NOW)

        assert len(state.expenses) == 1
        assert state.budget.lifestyle_balance == pytest.approx(15000)

    def test_delete(self) -> None:
        """Should remove the expense and update the budget."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 3000, ExpenseCategory.LIFESTYLE, "2024-01-03")), NOW)
        state = apply_action(state, DeleteExpense("a"), NOW)

        assert state.expenses == []
        assert state.budget.lifestyle_balance == pytest.approx(15000)

    def test_delete_unknown_id_keeps_expenses(self) -> None:
        """Should keep every expense for an unknown id."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 3000, ExpenseCategory.LIFESTYLE, "2024-01-03")), NOW)
        after = apply_action(state, DeleteExpense("missing"), NOW)

        assert after.expenses == state.expenses

    def test_add_to_completed_month_is_refused(self) -> None:
        """Expenses dated in a completed month can't be added."""
        state = replace(with_income(50000), completed_months=[Month("2024-01")], current_month=Month("2024-02"))
        expense = make_expense("late", 500, ExpenseCategory.LIFESTYLE, "2024-01-15")

        reason = rejection_reason(state, AddExpense(expense), NOW.date())
        assert reason == "January 2024 is completed; its transactions are locked."
        assert apply_action(state, AddExpense(expense), NOW) is state
        assert state.expenses == []

    def test_delete_from_completed_month_is_refused(self) -> None:
        """Should refuse to delete from a completed month."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 500, ExpenseCategory.LIFESTYLE, "2024-01-15")), NOW)
        state = apply_action(state, CompleteMonth(), NOW)

        assert rejection_reason(state, DeleteExpense("a"), NOW.date()) is not None
        after = apply_action(state, DeleteExpense("a"), NOW)
        assert after is state
        assert [e.id for e in after.expenses] == ["a"]


class TestCompleteMonth:
    """Tests for CompleteMonth."""

    def test_completes_and_advances(self) -> None:
        """Should snapshot the month and move to the next."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 20000, ExpenseCategory.FIXED_EXPENSES, "2024-01-02")), NOW)
        state = apply_action(state, CompleteMonth(), NOW)

        assert state.current_month == "2024-02"
        assert state.completed_months == ["2024-01"]
        assert len(state.snapshots) == 1
        assert state.snapshots[0].month == "2024-01"
        assert state.snapshots[0].total_spent == 20000
        assert state.snapshots[0].savings == 30000
        assert state.carryover_balance == 30000
        # February has no expenses yet; carryover lands in lifestyle
        assert state.budget.lifestyle_balance == pytest.approx(45000)

    def test_december_rolls_into_next_year(self) -> None:
        """Should move from December to January of the next year."""
        state = replace(default_state(NOW.date()), current_month=Month("2023-12"))
        state = apply_action(state, CompleteMonth(), NOW)
        assert state.current_month == "2024-01"

    def test_completing_same_month_twice_is_a_noop(self) -> None:
        """Should ignore completing the same month again."""
        state = with_income(50000)
        once = apply_action(state, CompleteMonth(Month("2024-01")), NOW)
        twice = apply_action(once, CompleteMonth(Month("2024-01")), NOW)

        assert twice is once
        assert rejection_reason(once, CompleteMonth(Month("2024-01")), NOW.date()) == (
            "January 2024 is already completed."
        )

    def test_already_completed_current_month_is_a_noop(self) -> None:
        """Should ignore completing a month already marked completed."""
        state = replace(with_income(50000), completed_months=[Month("2024-01")])
        assert apply_action(state, CompleteMonth(), NOW) is state

    def test_other_month_is_refused(self) -> None:
        """Should refuse to complete a month that isn't current."""
        state = with_income(50000)
        assert rejection_reason(state, CompleteMonth(Month("2024-03")), NOW.date()) == (
            "March 2024 is not the current month."
        )
        assert apply_action(state, CompleteMonth(Month("2024-03")), NOW) is state

    def test_snapshots_newest_first(self) -> None:
        """Should keep snapshots newest first and completed months in order."""
        state = with_income(1000)
        state = apply_action(state, CompleteMonth(), NOW)
        state = apply_action(state, CompleteMonth(), NOW)

        assert [s.month for s in state.snapshots] == ["2024-02", "2024-01"]
        assert state.completed_months == ["2024-01", "2024-02"]

    def test_carryover_accumulates(self) -> None:
        """-500 then +1200 leaves 700; February sees only January's -500."""
        state = with_income(10000)
        state = apply_action(
            state, AddExpense(make_expense("jan", 10500, ExpenseCategory.FIXED_EXPENSES, "2024-01-05")), NOW
        )
        state = apply_action(state, CompleteMonth(), NOW)
        assert state.carryover_balance == pytest.approx(-500)

        state = apply_action(
            state, AddExpense(make_expense("feb", 8800, ExpenseCategory.FIXED_EXPENSES, "2024-02-03")), NOW
        )
        # 30% of 10000 lifestyle, minus January's deficit
        assert state.budget.lifestyle_balance == pytest.approx(2500)

        state = apply_action(state, CompleteMonth(), NOW)
        assert state.snapshots[0].savings == pytest.approx(1200)
        assert state.carryover_balance == pytest.approx(700)
        assert state.budget.lifestyle_balance == pytest.approx(3700)


class TestOtherActions:
    """Tests for RecalculateBudget, ResetApp and unknown actions."""

    def test_recalculate_uses_new_date(self) -> None:
        """Should refresh the daily figure for a new date."""
        state = with_income(50000)
        later = apply_action(state, RecalculateBudget(), datetime(2024, 1, 31, 8, 0))

        assert later.budget.daily_safe_to_spend == pytest.approx(15000)
        assert later.expenses == state.expenses

    def test_reset(self) -> None:
        """Should return to the default state."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 10, ExpenseCategory.OTHER, "2024-01-02")), NOW)
        state = apply_action(state, CompleteMonth(), NOW)

        assert apply_action(state, ResetApp(), NOW) == default_state(NOW.date())

    def test_unknown_action_raises(self) -> None:
        """Should raise TypeError for an unknown action."""
        @dataclass(frozen=True)
        class Explode:
            pass

        with pytest.raises(TypeError, match="Explode"):
            apply_action(default_state(NOW.date()), Explode(), NOW)  # type: ignore[arg-type]


class TestRecords:
    """Tests for state_to_record and state_from_record."""

    def test_record_shape(self) -> None:
        """Should store the state without the derived budget."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 10, ExpenseCategory.OTHER, "2024-01-02")), NOW)
        state = apply_action(state, CompleteMonth(), NOW)
        record = state_to_record(state)

        assert set(record) == {
            "income",
            "config",
            "expenses",
            "currentMonth",
            "completedMonths",
            "snapshots",
            "carryoverBalance",
        }
        assert record["config"] == {
            "fixedExpensesPercentage": 0.5,
            "savingsPercentage": 0.15,
            "investmentPercentage": 0.05,
        }
        assert record["expenses"][0] == {
            "id": "a",
            "amount": 10,
            "description": "a",
            "category": "Other",
            "date": "2024-01-02",
            "createdAt": "2024-01-02T10:00:00",
        }
        assert record["snapshots"][0]["totalSpent"] == 10
        assert "budget" not in record

    def test_restores_saved_state(self) -> None:
        """Should rebuild the same state from its record."""
        state = with_income(50000)
        state = apply_action(state, AddExpense(make_expense("a", 10, ExpenseCategory.OTHER, "2024-01-02")), NOW)
        state = apply_action(state, CompleteMonth(), NOW)

        assert state_from_record(state_to_record(state), NOW.date()) == state

    def test_missing_fields_take_defaults(self) -> None:
        """Should fill missing fields with defaults."""
        state = state_from_record({"income": 20000}, NOW.date())

        assert state.income == 20000
        assert state.config == DEFAULT_BUDGET_CONFIG
        assert state.current_month == "2024-01"
        assert state.carryover_balance == 0
        assert state.budget.lifestyle_balance == pytest.approx(6000)

    def test_stored_budget_is_ignored(self) -> None:
        """Should recompute the budget instead of loading it."""
        state = state_from_record({"income": 1000, "budget": {"lifestyleBalance": 99999}}, NOW.date())
        assert state.budget.lifestyle_balance == pytest.approx(300)

    def test_none_gives_default(self) -> None:
        """Should give the default state when nothing is stored."""
        assert state_from_record(None, NOW.date()) == default_state(NOW.date())

    def test_malformed_entries_are_dropped(self) -> None:
        """Should drop malformed expenses and snapshots."""
        record = {
            "income": "lots",
            "config": {"fixedExpensesPercentage": 2},
            "expenses": [{"amount": 5}, "junk", {"id": "ok", "amount": 5, "category": "Mystery", "date": "2024-01-02"}],
            "snapshots": "nope",
        }
        state = state_from_record(record, NOW.date())

        assert state.income == 0
        assert state.config == DEFAULT_BUDGET_CONFIG
        assert [e.id for e in state.expenses] == ["ok"]
        assert state.expenses[0].category == ExpenseCategory.OTHER
        assert state.snapshots == []
