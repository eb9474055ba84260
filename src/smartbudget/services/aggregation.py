"""Expense aggregation used by the dashboard and expenses views.

Everything here is pure: inputs are collections already loaded in full,
``today`` is passed in, and nothing is mutated or cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..constants.categories import UNRESOLVED_CATEGORY_COLOR, UNRESOLVED_CATEGORY_NAME
from ..domain.records import ExpenseRecord, ExpenseWithCategory, LoadedExpense

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class CategorySpend:
    """Accumulated spend for one category name."""

    name: str
    total: Decimal
    color: str


def same_month(day: date, today: date) -> bool:
    return day.year == today.year and day.month == today.month


def total_amount(expenses: Iterable[ExpenseRecord]) -> Decimal:
    """Sum of ``amount`` across ``expenses``."""

    return sum((expense.amount for expense in expenses), ZERO)


def monthly_spend(expenses: Iterable[ExpenseRecord], today: date) -> Decimal:
    """Total spent in the calendar month (and year) containing ``today``."""

    return total_amount(expense for expense in expenses if same_month(expense.date, today))


def resolve_category(expense: LoadedExpense) -> tuple[str, str]:
    """Return (name, color) for an expense, falling back for unresolved categories."""

    if isinstance(expense, ExpenseWithCategory):
        return (
            expense.category.name or UNRESOLVED_CATEGORY_NAME,
            expense.category.color or UNRESOLVED_CATEGORY_COLOR,
        )
    return UNRESOLVED_CATEGORY_NAME, UNRESOLVED_CATEGORY_COLOR


def spend_by_category(expenses: Iterable[LoadedExpense]) -> dict[str, CategorySpend]:
    """Group spend by resolved category name.

    Keys appear in the order categories are first encountered. The colour of
    a group is taken from its first expense. No date filtering is applied.
    """

    totals: dict[str, CategorySpend] = {}
    for expense in expenses:
        name, color = resolve_category(expense)
        current = totals.get(name)
        if current is None:
            totals[name] = CategorySpend(name=name, total=expense.amount, color=color)
        else:
            totals[name] = CategorySpend(
                name=name, total=current.total + expense.amount, color=current.color
            )
    return totals


def _matches_search(expense: ExpenseRecord, needle: str) -> bool:
    if needle in expense.description.lower():
        return True
    return expense.notes is not None and needle in expense.notes.lower()


def filter_expenses(
    expenses: Iterable[LoadedExpense],
    search_term: str = "",
    category_id: Optional[str] = None,
) -> list[LoadedExpense]:
    """Expenses whose description or notes contain ``search_term`` (case-insensitive)
    AND whose category is ``category_id`` when one is given.

    An empty search term matches every expense; an empty or missing category
    id disables the category filter.
    """

    needle = (search_term or "").lower()
    return [
        expense
        for expense in expenses
        if _matches_search(expense, needle)
        and (not category_id or expense.category_id == category_id)
    ]


__all__ = [
    "CategorySpend",
    "filter_expenses",
    "monthly_spend",
    "resolve_category",
    "same_month",
    "spend_by_category",
    "total_amount",
]
