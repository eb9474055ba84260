"""Pytest configuration and shared fixtures for SmartBudget tests.

Provides an isolated SQLite database per test, a signed-in principal with the
default categories, a principal-scoped gateway and record factories that write
through that gateway.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from smartbudget.config import TestConfig
from smartbudget.domain.gateway import Collection
from smartbudget.infra.database import bootstrap_database
from smartbudget.infra.gateway import SQLModelGateway
from smartbudget.services.auth import LocalAuthClient, Principal
from smartbudget.session import SessionContext

TODAY = date(2024, 1, 20)

ALICE_EMAIL = "alice@example.com"
ALICE_PASSWORD = "secret123"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path, monkeypatch) -> TestConfig:
    """Configuration whose data directory (database and logs) lives under tmp."""

    monkeypatch.setenv("SMARTBUDGET_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("SMARTBUDGET_DATABASE_URL", raising=False)
    monkeypatch.delenv("SMARTBUDGET_RECENT_EXPENSES", raising=False)
    monkeypatch.setenv("SMARTBUDGET_DEV_MODE", "true")
    return TestConfig()


@pytest.fixture
def database(config):
    """Fresh file-backed SQLite database with every table created.

    Yields:
        tuple: (engine, session_factory)
    """

    engine, factory = bootstrap_database(config)
    yield engine, factory
    engine.dispose()


@pytest.fixture
def db_engine(database):
    return database[0]


@pytest.fixture
def session_factory(database):
    """Session factory yielding commit-or-rollback session contexts."""

    return database[1]


# =============================================================================
# Auth / session fixtures
# =============================================================================


@pytest.fixture
def auth_client(session_factory) -> LocalAuthClient:
    return LocalAuthClient(session_factory)


@pytest.fixture
def principal(auth_client) -> Principal:
    """Alice, signed up (and therefore signed in) with the default categories."""

    return auth_client.sign_up(email=ALICE_EMAIL, password=ALICE_PASSWORD, full_name="Alice")


@pytest.fixture
def session(auth_client, principal):
    ctx = SessionContext(auth_client)
    ctx.start()
    yield ctx
    ctx.close()


@pytest.fixture
def gateway(session_factory, auth_client) -> SQLModelGateway:
    return SQLModelGateway(session_factory, principal=auth_client.current_user_id)


@pytest.fixture
def clock() -> Callable[[], date]:
    """Fixed clock so month and window arithmetic is deterministic."""

    return lambda: TODAY


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def categories(gateway, principal) -> dict[str, str]:
    """Map of seeded category name to id for the signed-in principal."""

    rows = gateway.select(Collection.CATEGORIES, filters={"user_id": principal.id})
    return {row["name"]: row["id"] for row in rows}


@pytest.fixture
def expense_factory(gateway, principal, categories):
    """Factory inserting expenses through the gateway.

    Returns:
        Callable: Function that inserts an expense and returns its id
    """

    def _create_expense(
        amount: str | Decimal,
        description: str = "Test expense",
        category: str = "Food & Dining",
        day: date = TODAY,
        notes: str | None = None,
    ) -> str:
        return gateway.insert(
            Collection.EXPENSES,
            {
                "user_id": principal.id,
                "category_id": categories[category],
                "amount": Decimal(str(amount)),
                "description": description,
                "notes": notes,
                "date": day,
            },
        )

    return _create_expense


@pytest.fixture
def budget_factory(gateway, principal, categories):
    """Factory inserting budgets with an explicit window."""

    def _create_budget(
        amount: str | Decimal,
        category: str = "Food & Dining",
        period: str = "monthly",
        start: date = date(2024, 1, 1),
        end: date = date(2024, 2, 1),
    ) -> str:
        return gateway.insert(
            Collection.BUDGETS,
            {
                "user_id": principal.id,
                "category_id": categories[category],
                "amount": Decimal(str(amount)),
                "period": period,
                "start_date": start,
                "end_date": end,
            },
        )

    return _create_budget


@pytest.fixture
def goal_factory(gateway, principal):
    """Factory inserting savings goals."""

    def _create_goal(
        title: str = "Emergency fund",
        target: str | Decimal = "1000.00",
        current: str | Decimal = "0.00",
        target_date: date = date(2024, 2, 19),
    ) -> str:
        return gateway.insert(
            Collection.SAVINGS_GOALS,
            {
                "user_id": principal.id,
                "title": title,
                "target_amount": Decimal(str(target)),
                "current_amount": Decimal(str(current)),
                "target_date": target_date,
            },
        )

    return _create_goal
