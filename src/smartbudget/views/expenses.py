"""Expense list view controller."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..domain.gateway import Collection, Order
from ..domain.records import CategoryRecord, LoadedExpense, expense_from_row
from ..errors import ValidationError
from ..logging_config import get_logger
from ..services.aggregation import filter_expenses, total_amount
from .base import ViewController
from .forms import ExpenseForm

logger = get_logger(__name__)


class ExpensesController(ViewController):
    """Expense list with search/category filtering, creation and deletion."""

    name = "expenses"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.expenses: list[LoadedExpense] = []
        self.categories: list[CategoryRecord] = []
        self.search_term = ""
        self.category_filter = ""

    async def _fetch(self, user_id: str) -> tuple[list[LoadedExpense], list[CategoryRecord]]:
        owned = {"user_id": user_id}
        expense_rows, category_rows = await asyncio.gather(
            self._call(
                self.gateway.select,
                Collection.EXPENSES,
                filters=owned,
                order=Order("date", ascending=False),
                expand_category=True,
            ),
            self._call(
                self.gateway.select, Collection.CATEGORIES, filters=owned, order=Order("name")
            ),
        )
        return (
            [expense_from_row(row) for row in expense_rows],
            [CategoryRecord.from_row(row) for row in category_rows],
        )

    def _apply(self, snapshot: tuple[list[LoadedExpense], list[CategoryRecord]]) -> None:
        self.expenses, self.categories = snapshot

    # -- derived state ---------------------------------------------------

    def set_filters(
        self, *, search_term: Optional[str] = None, category_id: Optional[str] = None
    ) -> None:
        if search_term is not None:
            self.search_term = search_term
        if category_id is not None:
            self.category_filter = category_id

    @property
    def filtered(self) -> list[LoadedExpense]:
        """Expenses matching the current search AND category filter."""
        return filter_expenses(self.expenses, self.search_term, self.category_filter)

    @property
    def filtered_total(self) -> Decimal:
        return total_amount(self.filtered)

    @property
    def default_category_id(self) -> Optional[str]:
        """Preselected category for a new expense; None when the principal has none."""
        return self.categories[0].id if self.categories else None

    # -- mutations -------------------------------------------------------

    async def create_expense(self, data: Mapping[str, Any]) -> Optional[str]:
        """Validate ``data``, insert it for the signed-in principal and reload.

        Raises ``ValidationError`` without issuing a request when the form is
        invalid; returns the new id, or None when the gateway call failed.
        """

        form = ExpenseForm.from_mapping(data)
        if not form.validate(today=self.today()):
            raise ValidationError(form.errors)

        user_id = self._current_user_id("create")
        if user_id is None:
            return None
        record_id = await self._insert(Collection.EXPENSES, form.to_record(user_id=user_id))
        if record_id is not None:
            logger.info("Expense created", extra={"record_id": record_id})
            await self.refresh()
        return record_id

    async def delete_expense(self, expense_id: str) -> bool:
        deleted = await self._delete(
            Collection.EXPENSES, expense_id, "Are you sure you want to delete this expense?"
        )
        if deleted:
            self.expenses = [expense for expense in self.expenses if expense.id != expense_id]
        return deleted
