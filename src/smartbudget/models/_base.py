"""Column helpers shared by the table definitions."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Return a fresh UUID string, the identifier format used by every collection."""

    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
