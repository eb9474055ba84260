"""Budgeting domain services."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Protocol

from ..domain.records import BudgetRecord, ExpenseRecord
from ..models.budget import BudgetPeriod
from .aggregation import ZERO, total_amount

HUNDRED = Decimal("100")
WARNING_THRESHOLD = Decimal("80")


def add_one_month(start: date) -> date:
    """Same day next month, clamped to the last day when it does not exist.

    Jan 31 gives Feb 28 (29 in leap years), not the early-March date a plain
    month-field increment would roll over to.
    """

    year = start.year + (1 if start.month == 12 else 0)
    month = 1 if start.month == 12 else start.month + 1
    day = min(start.day, monthrange(year, month)[1])
    return date(year, month, day)


def compute_end_date(start_date: date, period: BudgetPeriod | str) -> date:
    """End date stored with a new budget; computed once at creation."""

    period = BudgetPeriod(period)
    if period is BudgetPeriod.WEEKLY:
        return start_date + timedelta(days=7)
    return add_one_month(start_date)


class ReferenceWindow(Protocol):
    """Date range a budget's spend is measured against."""

    def bounds(self, budget: BudgetRecord) -> tuple[date, date]:  # pragma: no cover - interface
        ...


@dataclass(frozen=True, slots=True)
class BudgetPeriodWindow:
    """The budget's own ``[start_date, end_date]``, as shown on the budgets view."""

    def bounds(self, budget: BudgetRecord) -> tuple[date, date]:
        return budget.start_date, budget.end_date


@dataclass(frozen=True, slots=True)
class CalendarMonthWindow:
    """The calendar month containing ``today``, as shown on the dashboard."""

    today: date

    def bounds(self, budget: BudgetRecord) -> tuple[date, date]:
        first = self.today.replace(day=1)
        last = self.today.replace(day=monthrange(self.today.year, self.today.month)[1])
        return first, last


@dataclass(frozen=True, slots=True)
class BudgetProgress:
    """Spend against one budget.

    ``percentage`` is clamped to [0, 100] for display; ``is_over_budget`` is
    derived from the unclamped ratio.
    """

    budget_id: str
    amount: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    is_over_budget: bool


def budget_progress(
    budget: BudgetRecord,
    expenses: Iterable[ExpenseRecord],
    window: ReferenceWindow,
) -> BudgetProgress:
    """Compute spend for ``budget`` over the expenses that fall inside ``window``."""

    start, end = window.bounds(budget)
    spent = total_amount(
        expense
        for expense in expenses
        if expense.category_id == budget.category_id and start <= expense.date <= end
    )

    if budget.amount > ZERO:
        raw_percentage = spent / budget.amount * HUNDRED
    else:
        # Amounts are validated > 0 before insert; treat any spend as fully over.
        raw_percentage = HUNDRED + 1 if spent > ZERO else ZERO

    return BudgetProgress(
        budget_id=budget.id,
        amount=budget.amount,
        spent=spent,
        remaining=max(ZERO, budget.amount - spent),
        percentage=min(HUNDRED, max(ZERO, raw_percentage)),
        is_over_budget=raw_percentage > HUNDRED,
    )


def budget_status(progress: BudgetProgress) -> str:
    """Traffic-light status: ``over``, ``warning`` (above 80%) or ``ok``."""

    if progress.is_over_budget:
        return "over"
    if progress.percentage > WARNING_THRESHOLD:
        return "warning"
    return "ok"


def over_budget_count(progress_rows: Iterable[BudgetProgress]) -> int:
    return sum(1 for progress in progress_rows if progress.is_over_budget)


__all__ = [
    "BudgetPeriodWindow",
    "BudgetProgress",
    "CalendarMonthWindow",
    "ReferenceWindow",
    "add_one_month",
    "budget_progress",
    "budget_status",
    "compute_end_date",
    "over_budget_count",
]
