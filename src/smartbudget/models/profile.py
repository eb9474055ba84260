"""Principal profile table."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import utcnow


class Profile(SQLModel, table=True):
    """Display data for a principal; owns every other record."""

    __tablename__: ClassVar[str] = "profiles"

    id: str = Field(primary_key=True, foreign_key="auth_users.id", ondelete="CASCADE", max_length=36)
    full_name: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=512)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
