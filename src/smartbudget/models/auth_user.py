"""Credentials table backing the local auth client."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import new_id, utcnow


class AuthUser(SQLModel, table=True):
    """Sign-in identity; its id becomes the principal id of the matching profile."""

    __tablename__: ClassVar[str] = "auth_users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    last_sign_in_at: Optional[datetime] = Field(default=None)
