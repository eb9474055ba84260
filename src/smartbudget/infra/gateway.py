"""SQLModel implementation of the data gateway.

Stands in for the hosted backend: every statement is filtered by the signed-in
principal the way row-level security policies would filter it, category
expansion mirrors ``select('*, category:categories(*)')``, and inserting a
profile seeds the default categories the way the backend trigger does.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, SQLModel, select

from ..constants.categories import DEFAULT_CATEGORIES
from ..domain.gateway import CATEGORY_EXPANDABLE, Collection, Order, Row
from ..errors import ConflictError, NotFoundError, RequestError
from ..logging_config import get_logger
from ..models import Budget, Category, Expense, Profile, SavingsGoal
from .database import SessionFactory

logger = get_logger(__name__)

PrincipalProvider = Callable[[], Optional[str]]

_MODELS: dict[Collection, type[SQLModel]] = {
    Collection.PROFILES: Profile,
    Collection.CATEGORIES: Category,
    Collection.EXPENSES: Expense,
    Collection.BUDGETS: Budget,
    Collection.SAVINGS_GOALS: SavingsGoal,
}


def _owner_column(collection: Collection) -> str:
    return "id" if collection is Collection.PROFILES else "user_id"


def seed_default_categories(session: Session, *, user_id: str) -> list[Category]:
    """Insert the default category set for a freshly created profile."""

    categories = [
        Category(user_id=user_id, name=seed.name, color=seed.color, icon=seed.icon)
        for seed in DEFAULT_CATEGORIES
    ]
    session.add_all(categories)
    logger.info(
        "Seeded default categories", extra={"user_id": user_id, "count": len(categories)}
    )
    return categories


class SQLModelGateway:
    """Principal-scoped CRUD over the five collections."""

    def __init__(self, session_factory: SessionFactory, principal: PrincipalProvider):
        """Initialize with a session factory and a callable returning the current user id."""
        self.session_factory = session_factory
        self._principal = principal

    # -- helpers ---------------------------------------------------------

    def _require_principal(self, collection: Collection) -> str:
        user_id = self._principal()
        if not user_id:
            raise RequestError("Not authenticated", collection=collection.value)
        return user_id

    @staticmethod
    def _model(collection: Collection) -> type[SQLModel]:
        try:
            return _MODELS[Collection(collection)]
        except (KeyError, ValueError) as exc:
            raise RequestError(f"Unknown collection: {collection!r}") from exc

    @staticmethod
    def _column(model: type[SQLModel], collection: Collection, name: str):
        if name not in model.model_fields:
            raise RequestError(
                f'column {collection.value}.{name} does not exist', collection=collection.value
            )
        return getattr(model, name)

    @staticmethod
    def _to_row(obj: SQLModel, *, expand_category: bool) -> Row:
        row = obj.model_dump()
        if expand_category:
            category = getattr(obj, "category", None)
            row["category"] = category.model_dump() if category is not None else None
        return row

    # -- contract --------------------------------------------------------

    def select(
        self,
        collection: Collection,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        expand_category: bool = False,
    ) -> list[Row]:
        """Return the principal's rows matching ``filters`` (equality on each column)."""

        collection = Collection(collection)
        model = self._model(collection)
        owner = self._require_principal(collection)

        statement = select(model).where(
            self._column(model, collection, _owner_column(collection)) == owner
        )
        for name, value in (filters or {}).items():
            statement = statement.where(self._column(model, collection, name) == value)
        if order is not None:
            column = self._column(model, collection, order.column)
            statement = statement.order_by(column.asc() if order.ascending else column.desc())
        if limit is not None:
            statement = statement.limit(max(int(limit), 0))
        if expand_category:
            if collection not in CATEGORY_EXPANDABLE:
                raise RequestError(
                    f"{collection.value} has no category relationship", collection=collection.value
                )
            statement = statement.options(selectinload(model.category))  # type: ignore[attr-defined]

        try:
            with self.session_factory() as session:
                rows = [
                    self._to_row(obj, expand_category=expand_category)
                    for obj in session.exec(statement).all()
                ]
        except SQLAlchemyError as exc:
            raise RequestError(str(exc), collection=collection.value) from exc

        logger.debug(
            "select", extra={"collection": collection.value, "rows": len(rows), "user_id": owner}
        )
        return rows

    def insert(self, collection: Collection, record: Mapping[str, Any]) -> str:
        """Insert ``record`` for the current principal and return the assigned id."""

        collection = Collection(collection)
        model = self._model(collection)
        owner = self._require_principal(collection)
        data = dict(record)

        unknown = sorted(set(data) - set(model.model_fields))
        if unknown:
            raise RequestError(
                f"Could not find the '{unknown[0]}' column of '{collection.value}'",
                collection=collection.value,
            )
        if data.get(_owner_column(collection)) != owner:
            raise RequestError(
                f'new row violates row-level security policy for table "{collection.value}"',
                collection=collection.value,
            )

        try:
            with self.session_factory() as session:
                obj = model(**data)
                session.add(obj)
                session.flush()
                if collection is Collection.PROFILES:
                    seed_default_categories(session, user_id=owner)
                record_id = str(obj.id)  # type: ignore[attr-defined]
        except IntegrityError as exc:
            raise RequestError(str(exc.orig), collection=collection.value) from exc
        except SQLAlchemyError as exc:
            raise RequestError(str(exc), collection=collection.value) from exc

        logger.info("insert", extra={"collection": collection.value, "record_id": record_id})
        return record_id

    def update(
        self,
        collection: Collection,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Apply ``changes`` to one of the principal's records.

        With ``expected`` the write only lands while every listed column still
        holds the given value (a compare-and-set in one UPDATE statement).
        """

        collection = Collection(collection)
        model = self._model(collection)
        owner = self._require_principal(collection)
        owner_column = _owner_column(collection)

        values = dict(changes)
        if not values:
            return
        if "id" in values or owner_column in values:
            raise RequestError(
                "record id and owner cannot be changed", collection=collection.value
            )
        for name in values:
            self._column(model, collection, name)

        id_column = self._column(model, collection, "id")
        owner_clause = self._column(model, collection, owner_column) == owner
        statement = sa_update(model).where(id_column == record_id, owner_clause)
        for name, value in (expected or {}).items():
            statement = statement.where(self._column(model, collection, name) == value)
        statement = statement.values(**values)

        try:
            with self.session_factory() as session:
                result = session.exec(statement)  # type: ignore[call-overload]
                if result.rowcount == 0:
                    exists = session.exec(
                        select(id_column).where(id_column == record_id, owner_clause)
                    ).first()
                    if exists is None:
                        raise NotFoundError(
                            f"{collection.value} record {record_id} not found",
                            collection=collection.value,
                        )
                    raise ConflictError(
                        f"{collection.value} record {record_id} was changed by another request",
                        collection=collection.value,
                    )
        except IntegrityError as exc:
            raise RequestError(str(exc.orig), collection=collection.value) from exc
        except SQLAlchemyError as exc:
            raise RequestError(str(exc), collection=collection.value) from exc

        logger.info("update", extra={"collection": collection.value, "record_id": record_id})

    def delete(self, collection: Collection, record_id: str) -> None:
        """Hard-delete one of the principal's records."""

        collection = Collection(collection)
        model = self._model(collection)
        owner = self._require_principal(collection)

        try:
            with self.session_factory() as session:
                obj = session.exec(
                    select(model).where(
                        self._column(model, collection, "id") == record_id,
                        self._column(model, collection, _owner_column(collection)) == owner,
                    )
                ).first()
                if obj is None:
                    raise NotFoundError(
                        f"{collection.value} record {record_id} not found",
                        collection=collection.value,
                    )
                session.delete(obj)
        except SQLAlchemyError as exc:
            raise RequestError(str(exc), collection=collection.value) from exc

        logger.info("delete", extra={"collection": collection.value, "record_id": record_id})
