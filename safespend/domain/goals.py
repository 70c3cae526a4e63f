"""Pure functions for the savings goal calculator.

The goal is independent of the main budget: it only reads the current
lifestyle balance to judge whether the goal fits the monthly surplus.
"""

import math
from dataclasses import dataclass
from typing import Any

from safespend.domain.models import Money


@dataclass(frozen=True)
class GoalInputs:
    """Goal calculator inputs, kept as the user typed them."""

    goal_name: str = ""
    total_cost: str = ""
    target_months: str = ""


@dataclass(frozen=True)
class GoalProgress:
    """Immutable evaluation of a goal against the current surplus."""

    required_monthly: Money
    monthly_surplus: Money
    remaining_buffer: Money
    on_track: bool
    status: str


def _parse_positive(raw: str) -> float | None:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def required_monthly(total_cost: str, target_months: str) -> Money:
    """Monthly amount needed to reach the goal; 0 when inputs are missing or invalid."""
    cost = _parse_positive(total_cost)
    months = _parse_positive(target_months)
    if cost is None or months is None:
        return Money(0.0)
    return Money(cost / months)


def evaluate_goal(goal: GoalInputs, lifestyle_balance: Money) -> GoalProgress:
    """Compare the goal's monthly requirement with the lifestyle surplus.

    Args:
        goal: Goal calculator inputs.
        lifestyle_balance: Remaining lifestyle balance (negative counts as 0).

    Returns:
        GoalProgress with the status message to show.
    """
    required = required_monthly(goal.total_cost, goal.target_months)
    surplus = Money(max(lifestyle_balance, 0.0))

    if required <= 0:
        on_track, status = False, "Add a goal cost and timeline to continue."
    elif surplus >= required:
        on_track, status = True, "On track with current surplus."
    else:
        on_track, status = False, "Goal exceeds current surplus."

    return GoalProgress(
        required_monthly=required,
        monthly_surplus=surplus,
        remaining_buffer=Money(surplus - required),
        on_track=on_track,
        status=status,
    )


def goal_to_record(goal: GoalInputs) -> dict[str, str]:
    return {
        "goalName": goal.goal_name,
        "totalCost": goal.total_cost,
        "targetMonths": goal.target_months,
    }


def goal_from_record(record: dict[str, Any] | None) -> GoalInputs:
    if not isinstance(record, dict):
        return GoalInputs()
    return GoalInputs(
        goal_name=str(record.get("goalName") or ""),
        total_cost=str(record.get("totalCost") or ""),
        target_months=str(record.get("targetMonths") or ""),
    )
