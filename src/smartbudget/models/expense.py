"""SQLModel definition for expenses."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Index
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ._base import new_id, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category


class Expense(SQLModel, table=True):
    """A single hand-entered expense."""

    __tablename__: ClassVar[str] = "expenses"
    __table_args__ = (Index("idx_expenses_user_date", "user_id", "date"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="profiles.id", ondelete="CASCADE", nullable=False)
    category_id: str = Field(
        foreign_key="categories.id", ondelete="CASCADE", nullable=False, index=True
    )
    amount: Decimal = Field(max_digits=10, decimal_places=2, nullable=False)
    description: str = Field(nullable=False, max_length=255)
    notes: Optional[str] = Field(default=None)
    # Attribution date for every period calculation, independent of created_at.
    date: dt.date = Field(default_factory=dt.date.today, nullable=False)
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)

    category: "Category" = Relationship(sa_relationship=relationship("Category"))
