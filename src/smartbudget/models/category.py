"""Expense category definitions."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlmodel import Field, SQLModel

from ._base import new_id, utcnow

DEFAULT_COLOR = "#6B7280"
DEFAULT_ICON = "Tag"


class Category(SQLModel, table=True):
    """Category referenced by expenses and budgets."""

    __tablename__: ClassVar[str] = "categories"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="profiles.id", ondelete="CASCADE", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=64)
    color: str = Field(default=DEFAULT_COLOR, nullable=False, max_length=7)
    icon: str = Field(default=DEFAULT_ICON, nullable=False, max_length=32)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
