"""Budgeting table."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ._base import new_id, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category


class BudgetPeriod(str, Enum):
    """Renewal cadence fixing how a budget's end date derives from its start."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Budget(SQLModel, table=True):
    """Spending limit for one category over a fixed window."""

    __tablename__: ClassVar[str] = "budgets"
    __table_args__ = (
        CheckConstraint("period IN ('weekly', 'monthly')", name="ck_budgets_period"),
        Index("idx_budgets_user_period", "user_id", "start_date", "end_date"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="profiles.id", ondelete="CASCADE", nullable=False)
    category_id: str = Field(foreign_key="categories.id", ondelete="CASCADE", nullable=False)
    amount: Decimal = Field(max_digits=10, decimal_places=2, nullable=False)
    period: str = Field(default=BudgetPeriod.MONTHLY.value, nullable=False, max_length=16)
    start_date: date = Field(nullable=False)
    # Derived from start_date + period once, at creation.
    end_date: date = Field(nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    category: "Category" = Relationship(sa_relationship=relationship("Category"))
