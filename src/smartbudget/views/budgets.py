"""Budget list view controller."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..domain.gateway import Collection, Order
from ..domain.records import (
    CategoryRecord,
    LoadedBudget,
    LoadedExpense,
    budget_from_row,
    expense_from_row,
)
from ..errors import ValidationError
from ..logging_config import get_logger
from ..services.budgeting import BudgetPeriodWindow, BudgetProgress, budget_progress, budget_status
from .base import ViewController
from .dashboard import budget_category_name
from .forms import BudgetForm

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BudgetRow:
    budget: LoadedBudget
    category_name: str
    progress: BudgetProgress
    status: str


@dataclass(frozen=True, slots=True)
class _Snapshot:
    budgets: list[LoadedBudget]
    expenses: list[LoadedExpense]
    categories: list[CategoryRecord]


class BudgetsController(ViewController):
    """Budgets with spend measured over each budget's own window."""

    name = "budgets"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.budgets: list[LoadedBudget] = []
        self.expenses: list[LoadedExpense] = []
        self.categories: list[CategoryRecord] = []

    async def _fetch(self, user_id: str) -> _Snapshot:
        owned = {"user_id": user_id}
        budget_rows, expense_rows, category_rows = await asyncio.gather(
            self._call(
                self.gateway.select,
                Collection.BUDGETS,
                filters=owned,
                order=Order("created_at", ascending=False),
                expand_category=True,
            ),
            self._call(self.gateway.select, Collection.EXPENSES, filters=owned),
            self._call(
                self.gateway.select, Collection.CATEGORIES, filters=owned, order=Order("name")
            ),
        )
        return _Snapshot(
            budgets=[budget_from_row(row) for row in budget_rows],
            expenses=[expense_from_row(row) for row in expense_rows],
            categories=[CategoryRecord.from_row(row) for row in category_rows],
        )

    def _apply(self, snapshot: _Snapshot) -> None:
        self.budgets = snapshot.budgets
        self.expenses = snapshot.expenses
        self.categories = snapshot.categories

    def rows(self) -> list[BudgetRow]:
        window = BudgetPeriodWindow()
        rows = []
        for budget in self.budgets:
            progress = budget_progress(budget, self.expenses, window)
            rows.append(
                BudgetRow(
                    budget=budget,
                    category_name=budget_category_name(budget),
                    progress=progress,
                    status=budget_status(progress),
                )
            )
        return rows

    async def create_budget(self, data: Mapping[str, Any]) -> Optional[str]:
        """Validate, stamp owner and window (start today), insert and reload."""

        form = BudgetForm.from_mapping(data)
        if not form.validate():
            raise ValidationError(form.errors)

        user_id = self._current_user_id("create")
        if user_id is None:
            return None
        record = form.to_record(user_id=user_id, today=self.today())
        record_id = await self._insert(Collection.BUDGETS, record)
        if record_id is not None:
            logger.info(
                "Budget created",
                extra={"record_id": record_id, "period": record["period"], "end_date": record["end_date"]},
            )
            await self.refresh()
        return record_id

    async def delete_budget(self, budget_id: str) -> bool:
        deleted = await self._delete(
            Collection.BUDGETS, budget_id, "Are you sure you want to delete this budget?"
        )
        if deleted:
            self.budgets = [budget for budget in self.budgets if budget.id != budget_id]
        return deleted
