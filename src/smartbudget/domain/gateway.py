"""Remote data gateway protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Protocol

Row = dict[str, Any]


class Collection(str, Enum):
    """The five record collections exposed by the backend."""

    PROFILES = "profiles"
    CATEGORIES = "categories"
    EXPENSES = "expenses"
    BUDGETS = "budgets"
    SAVINGS_GOALS = "savings_goals"


# Collections whose rows reference exactly one category
CATEGORY_EXPANDABLE = frozenset({Collection.EXPENSES, Collection.BUDGETS})


@dataclass(frozen=True, slots=True)
class Order:
    """Sort instruction for ``select``."""

    column: str
    ascending: bool = True


class DataGateway(Protocol):
    """CRUD contract consumed by the view controllers.

    Every call is scoped to the authenticated principal by the backend. Failures
    raise ``RequestError`` (or one of its subclasses); a query that matches
    nothing returns an empty list, never an error.
    """

    def select(
        self,
        collection: Collection,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        expand_category: bool = False,
    ) -> list[Row]:
        """Return matching rows; with ``expand_category`` each row carries ``category``."""
        ...

    def insert(self, collection: Collection, record: Mapping[str, Any]) -> str:
        """Insert ``record`` and return its assigned id."""
        ...

    def update(
        self,
        collection: Collection,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Apply ``changes``; when ``expected`` is given the stored values must still match."""
        ...

    def delete(self, collection: Collection, record_id: str) -> None:
        """Hard-delete a record."""
        ...
