"""Savings goal table."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from sqlmodel import Field, SQLModel

from ._base import new_id, utcnow


class SavingsGoal(SQLModel, table=True):
    """Target amount the principal is saving towards by a date."""

    __tablename__: ClassVar[str] = "savings_goals"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="profiles.id", ondelete="CASCADE", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=120)
    target_amount: Decimal = Field(max_digits=10, decimal_places=2, nullable=False)
    current_amount: Decimal = Field(
        default=Decimal("0.00"), max_digits=10, decimal_places=2, nullable=False
    )
    target_date: date = Field(nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
