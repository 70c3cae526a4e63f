"""Application state store.

A BudgetSession is the single owner of the current AppState. It applies one
action at a time, persists the whole aggregate after every accepted
transition and hands derived views (budget, insights, goal progress) to the
CLI. The wall clock and the storage sink are injected so both can be
replaced in tests.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from safespend.domain.breakdown import expenses_in_month
from safespend.domain.budget import DEFAULT_BUDGET_CONFIG, Budget, BudgetConfig
from safespend.domain.goals import GoalInputs, GoalProgress, evaluate_goal, goal_from_record, goal_to_record
from safespend.domain.insights import Insight, generate_insights
from safespend.domain.expenses import Expense
from safespend.domain.state import (
    Action,
    AppState,
    RecalculateBudget,
    ResetApp,
    apply_action,
    rejection_reason,
    state_from_record,
    state_to_record,
)
from safespend.store.records import APP_STATE_KEY, GOAL_KEY, KeyValueSink

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class BudgetSession:
    """Serial handle on the application state."""

    def __init__(
        self,
        sink: KeyValueSink,
        clock: Clock = datetime.now,
        default_config: BudgetConfig = DEFAULT_BUDGET_CONFIG,
    ) -> None:
        self.sink = sink
        self.clock = clock
        self.default_config = default_config
        self.state: AppState = state_from_record(None, clock().date(), default_config)

    def load(self) -> AppState:
        """Read the stored aggregate. The budget is always recomputed, never loaded."""
        record = self.sink.get(APP_STATE_KEY)
        self.state = state_from_record(record, self.clock().date(), self.default_config)
        logger.debug("Loaded state for %s (%d expenses)", self.state.current_month, len(self.state.expenses))
        return self.state

    def save(self) -> None:
        self.sink.set(APP_STATE_KEY, state_to_record(self.state))

    def dispatch(self, action: Action) -> str | None:
        """Apply one action and persist the result.

        Args:
            action: Transition to apply.

        Returns:
            Validation message if the action was refused (state unchanged),
            otherwise None.

        Raises:
            TypeError: If the action kind is not recognised.
        """
        now = self.clock()
        reason = rejection_reason(self.state, action, now.date())
        if reason:
            logger.info("Refused %s: %s", type(action).__name__, reason)
            return reason

        self.state = apply_action(self.state, action, now)
        self.save()
        return None

    def refresh(self) -> Budget:
        """Recompute date-dependent figures, e.g. when the app regains focus."""
        self.state = apply_action(self.state, RecalculateBudget(), self.clock())
        return self.state.budget

    def reset(self) -> None:
        """Wipe storage and return to the default state."""
        self.sink.clear()
        self.dispatch(ResetApp(self.default_config))

    @property
    def budget(self) -> Budget:
        return self.state.budget

    def month_expenses(self) -> list[Expense]:
        """Expenses of the current (open) month, newest first."""
        return expenses_in_month(self.state.expenses, self.state.current_month, self.clock().date())

    def insights(self) -> list[Insight]:
        return generate_insights(
            self.state.income,
            self.state.config,
            self.state.expenses,
            reference_month=self.state.current_month,
            today=self.clock().date(),
        )

    def load_goal(self) -> GoalInputs:
        return goal_from_record(self.sink.get(GOAL_KEY))

    def save_goal(self, goal: GoalInputs) -> None:
        self.sink.set(GOAL_KEY, goal_to_record(goal))

    def goal_progress(self, goal: GoalInputs | None = None) -> GoalProgress:
        if goal is None:
            goal = self.load_goal()
        return evaluate_goal(goal, self.state.budget.lifestyle_balance)
