"""View controller tests: loading, derived metrics, mutations and failure handling."""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from smartbudget.domain.gateway import Collection
from smartbudget.domain.records import CategoryRecord, ExpenseCategoryUnresolved, expense_from_row
from smartbudget.errors import ValidationError
from smartbudget.services.auth import FRIENDLY_INVALID_CREDENTIALS
from smartbudget.views import (
    AuthController,
    BudgetsController,
    DashboardController,
    ExpensesController,
    FailurePolicy,
    GoalsController,
)


def _run(coro):
    return asyncio.run(coro)


# =============================================================================
# Dashboard
# =============================================================================


def test_dashboard_summary(gateway, session, clock, expense_factory, budget_factory, goal_factory):
    expense_factory("50.00", description="Groceries", day=date(2024, 1, 5))
    expense_factory("30.00", description="Dinner", day=date(2024, 1, 18))
    expense_factory("20.00", description="Fuel", category="Transportation", day=date(2023, 12, 28))
    # Own window is December; the dashboard measures January instead
    budget_factory("60.00", start=date(2023, 12, 1), end=date(2024, 1, 1))
    goal_factory()

    view = DashboardController(gateway, session, clock=clock, recent_limit=2)
    assert _run(view.refresh()) is True
    summary = view.summary()

    assert summary.monthly_spend == Decimal("80.00")
    assert summary.budget_count == 1
    assert summary.goal_count == 1
    assert summary.over_budget_count == 1
    assert [(entry.name, entry.total) for entry in summary.spend_by_category] == [
        ("Food & Dining", Decimal("80.00")),
        ("Transportation", Decimal("20.00")),
    ]
    assert summary.budget_rows[0].category_name == "Food & Dining"
    assert summary.budget_rows[0].progress.spent == Decimal("80.00")
    assert summary.budget_rows[0].status == "over"
    assert [expense.description for expense in summary.recent_expenses] == ["Dinner", "Groceries"]


def test_dashboard_with_no_data(gateway, session, clock):
    view = DashboardController(gateway, session, clock=clock)
    _run(view.refresh())
    summary = view.summary()

    assert summary.monthly_spend == Decimal("0")
    assert summary.spend_by_category == []
    assert summary.budget_rows == []
    assert summary.over_budget_count == 0


# =============================================================================
# Expenses
# =============================================================================


def test_create_expense_reloads_with_category(gateway, session, clock, categories):
    view = ExpensesController(gateway, session, clock=clock)
    _run(view.refresh())

    record_id = _run(
        view.create_expense(
            {"amount": "4.75", "description": "Coffee", "category_id": categories["Food & Dining"]}
        )
    )

    assert record_id is not None
    assert [expense.id for expense in view.expenses] == [record_id]
    created = view.expenses[0]
    assert created.date == date(2024, 1, 20)
    assert created.category.name == "Food & Dining"
    assert view.filtered_total == Decimal("4.75")


def test_invalid_expense_issues_no_request(gateway, session, clock):
    view = ExpensesController(gateway, session, clock=clock)

    with pytest.raises(ValidationError) as excinfo:
        _run(view.create_expense({"amount": "-3", "description": "", "category_id": ""}))

    assert set(excinfo.value.errors) == {"amount", "description", "category_id"}
    assert gateway.select(Collection.EXPENSES) == []


def test_delete_updates_filtered_list(gateway, session, clock, expense_factory):
    keep = expense_factory("3.00", description="Coffee beans")
    drop = expense_factory("4.00", description="Iced coffee")
    expense_factory("50.00", description="Groceries")

    view = ExpensesController(gateway, session, clock=clock)
    _run(view.refresh())
    view.set_filters(search_term="coffee")
    assert {expense.id for expense in view.filtered} == {keep, drop}

    assert _run(view.delete_expense(drop)) is True

    assert [expense.id for expense in view.filtered] == [keep]
    assert len(view.expenses) == 2
    assert view.filtered_total == Decimal("3.00")


def test_cancelled_delete_keeps_record(gateway, session, clock, expense_factory):
    expense_id = expense_factory("3.00")
    prompts = []

    def _decline(prompt):
        prompts.append(prompt)
        return False

    view = ExpensesController(gateway, session, clock=clock, confirm=_decline)
    _run(view.refresh())

    assert _run(view.delete_expense(expense_id)) is False
    assert prompts == ["Are you sure you want to delete this expense?"]
    assert len(gateway.select(Collection.EXPENSES)) == 1


def test_no_categories_means_no_default(gateway, session, clock, categories):
    for category_id in categories.values():
        gateway.delete(Collection.CATEGORIES, category_id)

    view = ExpensesController(gateway, session, clock=clock)
    _run(view.refresh())

    assert view.categories == []
    assert view.default_category_id is None


def test_default_category_is_first_by_name(gateway, session, clock, categories):
    view = ExpensesController(gateway, session, clock=clock)
    _run(view.refresh())

    assert view.default_category_id == categories["Bills & Utilities"]


# =============================================================================
# Load ordering and failure policies
# =============================================================================


class _ScriptedExpenses(ExpensesController):
    """Controller whose loads return queued snapshots once their gate opens."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.script = []

    async def _fetch(self, user_id):
        snapshot, gate = self.script.pop(0)
        await gate.wait()
        return snapshot


def _expense_record(description):
    return ExpenseCategoryUnresolved(
        id=description,
        user_id="u1",
        category_id="c1",
        amount=Decimal("1.00"),
        description=description,
        date=date(2024, 1, 1),
    )


def test_superseded_load_is_discarded(gateway, session, clock):
    view = _ScriptedExpenses(gateway, session, clock=clock)
    category = CategoryRecord(id="c1", user_id="u1", name="Food", color="#fff", icon="Tag")

    async def scenario():
        slow_gate, fast_gate = asyncio.Event(), asyncio.Event()
        view.script = [
            (([_expense_record("stale")], [category]), slow_gate),
            (([_expense_record("fresh")], [category]), fast_gate),
        ]
        slow = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        fast = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)

        fast_gate.set()
        fast_applied = await fast
        slow_gate.set()
        slow_applied = await slow
        return fast_applied, slow_applied

    fast_applied, slow_applied = _run(scenario())

    assert fast_applied is True
    assert slow_applied is False
    assert [expense.description for expense in view.expenses] == ["fresh"]
    assert view.loading is False


class _BrokenRowExpenses(ExpensesController):
    async def _fetch(self, user_id):
        return expense_from_row({"id": "e1", "user_id": user_id})


def test_unexpected_load_error_still_clears_loading(gateway, session, clock):
    view = _BrokenRowExpenses(gateway, session, clock=clock)

    with pytest.raises(KeyError):
        _run(view.refresh())

    assert view.loading is False
    assert view.loaded is False


def test_silent_failure_keeps_previous_collection(
    auth_client, gateway, session, clock, expense_factory
):
    expense_factory("9.00")
    view = ExpensesController(gateway, session, clock=clock)
    _run(view.refresh())

    auth_client.sign_out()

    assert _run(view.refresh()) is False
    assert len(view.expenses) == 1
    assert view.error is None
    assert view.loading is False


def test_surfaced_failure_sets_error(auth_client, gateway, session, clock):
    view = GoalsController(gateway, session, clock=clock, failure_policy=FailurePolicy.SURFACE)
    auth_client.sign_out()

    assert _run(view.refresh()) is False
    assert view.error == "Not authenticated"


def test_create_without_principal_reports_failure(auth_client, gateway, session, clock, categories):
    view = ExpensesController(gateway, session, clock=clock, failure_policy=FailurePolicy.SURFACE)
    auth_client.sign_out()

    record_id = _run(
        view.create_expense(
            {"amount": "1.00", "description": "Gum", "category_id": categories["Other"]}
        )
    )

    assert record_id is None
    assert view.error == "Not authenticated"


# =============================================================================
# Budgets
# =============================================================================


def test_budgets_use_their_own_window(gateway, session, clock, expense_factory, categories):
    expense_factory("40.00", day=date(2024, 1, 18))
    expense_factory("500.00", day=date(2024, 1, 2))

    view = BudgetsController(gateway, session, clock=clock)
    _run(view.refresh())
    record_id = _run(
        view.create_budget(
            {"category_id": categories["Food & Dining"], "amount": "100", "period": "weekly"}
        )
    )

    rows = view.rows()
    assert [row.budget.id for row in rows] == [record_id]
    row = rows[0]
    assert row.budget.start_date == date(2024, 1, 20)
    assert row.budget.end_date == date(2024, 1, 27)
    assert row.category_name == "Food & Dining"
    assert row.progress.spent == Decimal("0")
    assert row.status == "ok"


def test_delete_budget(gateway, session, clock, budget_factory):
    budget_id = budget_factory("100.00")
    view = BudgetsController(gateway, session, clock=clock)
    _run(view.refresh())

    assert _run(view.delete_budget(budget_id)) is True
    assert view.budgets == []


# =============================================================================
# Goals
# =============================================================================


def test_create_goal_and_add_progress(gateway, session, clock):
    view = GoalsController(gateway, session, clock=clock)
    _run(view.refresh())
    goal_id = _run(
        view.create_goal(
            {"title": "Laptop", "target_amount": "1000", "target_date": "2024-01-30"}
        )
    )

    assert _run(view.add_progress(goal_id, "200.00")) is True

    row = view.rows()[0]
    assert row.goal.current_amount == Decimal("200.00")
    assert row.progress.pace.daily == Decimal("80.00")
    stored = gateway.select(Collection.SAVINGS_GOALS)[0]
    assert Decimal(str(stored["current_amount"])) == Decimal("200.00")


def test_add_progress_conflict_reloads(gateway, session, clock, goal_factory):
    goal_id = goal_factory(current="100.00")
    view = GoalsController(gateway, session, clock=clock, failure_policy=FailurePolicy.SURFACE)
    _run(view.refresh())

    # Another device saved progress after this view loaded
    gateway.update(Collection.SAVINGS_GOALS, goal_id, {"current_amount": Decimal("150.00")})

    assert _run(view.add_progress(goal_id, "25.00")) is False
    assert view.goals[0].current_amount == Decimal("150.00")
    assert "changed by another request" in view.error

    assert _run(view.add_progress(goal_id, "25.00")) is True
    assert view.goals[0].current_amount == Decimal("175.00")


def test_add_progress_rejects_non_positive_amount(gateway, session, clock, goal_factory):
    goal_id = goal_factory()
    view = GoalsController(gateway, session, clock=clock)
    _run(view.refresh())

    with pytest.raises(ValidationError):
        _run(view.add_progress(goal_id, "0"))


def test_goals_are_ordered_by_target_date(gateway, session, clock, goal_factory):
    goal_factory(title="Later", target_date=date(2024, 6, 1))
    goal_factory(title="Sooner", target_date=date(2024, 2, 1))
    view = GoalsController(gateway, session, clock=clock)
    _run(view.refresh())

    assert [goal.title for goal in view.goals] == ["Sooner", "Later"]


# =============================================================================
# Auth
# =============================================================================


def test_auth_controller_surfaces_friendly_login_error(auth_client, principal):
    auth_client.sign_out()
    view = AuthController(auth_client)

    result = _run(view.submit({"email": "alice@example.com", "password": "nope-nope"}))

    assert result is None
    assert view.error == FRIENDLY_INVALID_CREDENTIALS
    assert view.loading is False


def test_auth_controller_sign_up_then_sign_out(auth_client, session_factory):
    view = AuthController(auth_client)
    view.toggle_mode()

    principal = _run(
        view.submit({"email": "dan@example.com", "password": "password1", "full_name": "Dan"})
    )

    assert principal is not None
    assert auth_client.current_user_id() == principal.id
    _run(view.sign_out())
    assert auth_client.current_user() is None


def test_auth_controller_validates_before_calling_backend(auth_client):
    view = AuthController(auth_client, signing_up=True)

    with pytest.raises(ValidationError):
        _run(view.submit({"email": "eve@example.com", "password": "123", "full_name": "Eve"}))

    assert auth_client.current_user() is None
