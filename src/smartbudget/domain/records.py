"""Typed, immutable views of gateway rows.

The gateway hands back plain mappings (the shape a hosted backend returns as
JSON). Controllers parse them here once so that the aggregation functions work
on real types. A row fetched with its category expanded becomes a
``*WithCategory`` record; anything else becomes ``*CategoryUnresolved`` and
every consumer has to handle that case explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from ..models.budget import BudgetPeriod

CENTS = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Coerce a stored amount into a two-decimal ``Decimal``."""

    if isinstance(value, Decimal):
        amount = value
    elif value is None:
        amount = Decimal("0")
    else:
        try:
            # str() keeps float inputs like 0.1 from dragging binary noise along
            amount = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Not a monetary amount: {value!r}") from exc
    return amount.quantize(CENTS)


def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Not a calendar date: {value!r}")


def to_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise ValueError(f"Not a timestamp: {value!r}")


@dataclass(frozen=True, slots=True, kw_only=True)
class ProfileRecord:
    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ProfileRecord:
        return cls(
            id=str(row["id"]),
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
            created_at=to_datetime(row.get("created_at")),
            updated_at=to_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class CategoryRecord:
    id: str
    user_id: str
    name: str
    color: str
    icon: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> CategoryRecord:
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=row["name"],
            color=row.get("color") or "",
            icon=row.get("icon") or "",
            created_at=to_datetime(row.get("created_at")),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ExpenseRecord:
    """Fields shared by both expense variants."""

    id: str
    user_id: str
    category_id: str
    amount: Decimal
    description: str
    date: date
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExpenseWithCategory(ExpenseRecord):
    category: CategoryRecord


@dataclass(frozen=True, slots=True, kw_only=True)
class ExpenseCategoryUnresolved(ExpenseRecord):
    pass


LoadedExpense = Union[ExpenseWithCategory, ExpenseCategoryUnresolved]


def expense_from_row(row: Mapping[str, Any]) -> LoadedExpense:
    fields = dict(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        category_id=str(row["category_id"]),
        amount=to_money(row["amount"]),
        description=row.get("description") or "",
        date=to_date(row["date"]),
        notes=row.get("notes"),
        created_at=to_datetime(row.get("created_at")),
    )
    category = row.get("category")
    if category:
        return ExpenseWithCategory(category=CategoryRecord.from_row(category), **fields)
    return ExpenseCategoryUnresolved(**fields)


@dataclass(frozen=True, slots=True, kw_only=True)
class BudgetRecord:
    """Fields shared by both budget variants."""

    id: str
    user_id: str
    category_id: str
    amount: Decimal
    period: BudgetPeriod
    start_date: date
    end_date: date
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class BudgetWithCategory(BudgetRecord):
    category: CategoryRecord


@dataclass(frozen=True, slots=True, kw_only=True)
class BudgetCategoryUnresolved(BudgetRecord):
    pass


LoadedBudget = Union[BudgetWithCategory, BudgetCategoryUnresolved]


def budget_from_row(row: Mapping[str, Any]) -> LoadedBudget:
    fields = dict(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        category_id=str(row["category_id"]),
        amount=to_money(row["amount"]),
        period=BudgetPeriod(row["period"]),
        start_date=to_date(row["start_date"]),
        end_date=to_date(row["end_date"]),
        created_at=to_datetime(row.get("created_at")),
    )
    category = row.get("category")
    if category:
        return BudgetWithCategory(category=CategoryRecord.from_row(category), **fields)
    return BudgetCategoryUnresolved(**fields)


@dataclass(frozen=True, slots=True, kw_only=True)
class GoalRecord:
    id: str
    user_id: str
    title: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> GoalRecord:
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            title=row["title"],
            target_amount=to_money(row["target_amount"]),
            current_amount=to_money(row.get("current_amount")),
            target_date=to_date(row["target_date"]),
            created_at=to_datetime(row.get("created_at")),
            updated_at=to_datetime(row.get("updated_at")),
        )


__all__ = [
    "BudgetCategoryUnresolved",
    "BudgetRecord",
    "BudgetWithCategory",
    "CategoryRecord",
    "ExpenseCategoryUnresolved",
    "ExpenseRecord",
    "ExpenseWithCategory",
    "GoalRecord",
    "LoadedBudget",
    "LoadedExpense",
    "ProfileRecord",
    "budget_from_row",
    "expense_from_row",
    "to_date",
    "to_money",
]
