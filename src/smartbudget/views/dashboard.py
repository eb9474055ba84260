"""Dashboard view controller."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ..constants.categories import UNKNOWN_BUDGET_CATEGORY
from ..domain.gateway import Collection, Order
from ..domain.records import (
    BudgetWithCategory,
    CategoryRecord,
    GoalRecord,
    LoadedBudget,
    LoadedExpense,
    budget_from_row,
    expense_from_row,
)
from ..services.aggregation import CategorySpend, monthly_spend, spend_by_category
from ..services.budgeting import (
    BudgetProgress,
    CalendarMonthWindow,
    budget_progress,
    budget_status,
    over_budget_count,
)
from .base import ViewController

DEFAULT_RECENT_EXPENSES = 5


@dataclass(frozen=True, slots=True)
class BudgetSummaryRow:
    category_name: str
    progress: BudgetProgress
    status: str


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    monthly_spend: Decimal
    budget_count: int
    goal_count: int
    over_budget_count: int
    spend_by_category: list[CategorySpend] = field(default_factory=list)
    budget_rows: list[BudgetSummaryRow] = field(default_factory=list)
    recent_expenses: list[LoadedExpense] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class _Snapshot:
    categories: list[CategoryRecord]
    expenses: list[LoadedExpense]
    budgets: list[LoadedBudget]
    goals: list[GoalRecord]


def budget_category_name(budget: LoadedBudget) -> str:
    if isinstance(budget, BudgetWithCategory):
        return budget.category.name
    return UNKNOWN_BUDGET_CATEGORY


class DashboardController(ViewController):
    """Aggregates the principal's data into the dashboard metrics.

    Budget progress here is measured over the current calendar month, not the
    budget's own window; the budgets view uses the latter.
    """

    name = "dashboard"

    def __init__(self, *args: Any, recent_limit: int = DEFAULT_RECENT_EXPENSES, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.recent_limit = recent_limit
        self.categories: list[CategoryRecord] = []
        self.expenses: list[LoadedExpense] = []
        self.budgets: list[LoadedBudget] = []
        self.goals: list[GoalRecord] = []

    async def _fetch(self, user_id: str) -> _Snapshot:
        owned = {"user_id": user_id}
        category_rows, expense_rows, budget_rows, goal_rows = await asyncio.gather(
            self._call(self.gateway.select, Collection.CATEGORIES, filters=owned),
            self._call(
                self.gateway.select,
                Collection.EXPENSES,
                filters=owned,
                order=Order("date", ascending=False),
                expand_category=True,
            ),
            self._call(
                self.gateway.select, Collection.BUDGETS, filters=owned, expand_category=True
            ),
            self._call(self.gateway.select, Collection.SAVINGS_GOALS, filters=owned),
        )
        return _Snapshot(
            categories=[CategoryRecord.from_row(row) for row in category_rows],
            expenses=[expense_from_row(row) for row in expense_rows],
            budgets=[budget_from_row(row) for row in budget_rows],
            goals=[GoalRecord.from_row(row) for row in goal_rows],
        )

    def _apply(self, snapshot: _Snapshot) -> None:
        self.categories = snapshot.categories
        self.expenses = snapshot.expenses
        self.budgets = snapshot.budgets
        self.goals = snapshot.goals

    def summary(self) -> DashboardSummary:
        """Derive every dashboard metric from the loaded collections."""

        today = self.today()
        window = CalendarMonthWindow(today)
        rows = []
        for budget in self.budgets:
            progress = budget_progress(budget, self.expenses, window)
            rows.append(
                BudgetSummaryRow(
                    category_name=budget_category_name(budget),
                    progress=progress,
                    status=budget_status(progress),
                )
            )

        return DashboardSummary(
            monthly_spend=monthly_spend(self.expenses, today),
            budget_count=len(self.budgets),
            goal_count=len(self.goals),
            over_budget_count=over_budget_count(row.progress for row in rows),
            spend_by_category=list(spend_by_category(self.expenses).values()),
            budget_rows=rows,
            recent_expenses=self.expenses[: self.recent_limit],
        )
