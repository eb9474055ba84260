"""Command line interface for SmartBudget."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Iterator, Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .domain.records import CategoryRecord
from .errors import AuthError, ValidationError
from .services.auth import friendly_auth_message
from .views import FailurePolicy

_email_option = click.option(
    "--email", envvar="SMARTBUDGET_EMAIL", required=True, help="Account email."
)
_password_option = click.option(
    "--password",
    envvar="SMARTBUDGET_PASSWORD",
    required=True,
    hide_input=True,
    help="Account password.",
)


@contextmanager
def _app_context(*, verbose: bool = False) -> Iterator[AppContext]:
    try:
        ctx = create_app_context(BaseConfig(), configure_logging=verbose)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    try:
        yield ctx
    finally:
        ctx.close()


@contextmanager
def _signed_in(email: str, password: str) -> Iterator[AppContext]:
    with _app_context() as ctx:
        try:
            ctx.auth.sign_in(email=email, password=password)
        except AuthError as exc:
            raise click.ClickException(friendly_auth_message(exc, is_login=True)) from exc
        yield ctx


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{field}: {message}" for field, messages in exc.errors.items() for message in messages
    )


def _find_category(categories: list[CategoryRecord], name: str) -> CategoryRecord:
    wanted = name.strip().lower()
    for category in categories:
        if category.name.lower() == wanted:
            return category
    available = ", ".join(category.name for category in categories) or "none"
    raise click.BadParameter(f"Unknown category {name!r} (available: {available})")


def _raise_if_failed(record_id: Optional[str], error: Optional[str], what: str) -> str:
    if record_id is None:
        raise click.ClickException(error or f"Could not create {what}")
    return record_id


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log to console and file.")
@click.pass_context
def cli(click_ctx: click.Context, verbose: bool) -> None:
    """SmartBudget: expenses, budgets and savings goals."""

    click_ctx.ensure_object(dict)
    click_ctx.obj["verbose"] = verbose


@cli.command("init-db")
@click.pass_context
def init_db(click_ctx: click.Context) -> None:
    """Create the database schema."""

    with _app_context(verbose=click_ctx.obj["verbose"]) as ctx:
        click.echo(f"Database ready: {ctx.engine.url}")


@cli.command()
@_email_option
@_password_option
@click.option("--name", "full_name", required=True, help="Full name shown on the profile.")
def register(email: str, password: str, full_name: str) -> None:
    """Create an account with the default categories."""

    with _app_context() as ctx:
        view = ctx.auth_view(signing_up=True)
        try:
            principal = asyncio.run(
                view.submit({"email": email, "password": password, "full_name": full_name})
            )
        except ValidationError as exc:
            raise click.ClickException(_validation_message(exc)) from exc
        if principal is None:
            raise click.ClickException(view.error or "Sign up failed")
        click.echo(f"Registered {principal.email}")


@cli.command("add-expense")
@_email_option
@_password_option
@click.option("--amount", required=True, help="Amount, e.g. 12.50.")
@click.option("--description", required=True)
@click.option("--category", "category_name", required=True, help="Category name.")
@click.option("--date", "expense_date", default="", help="YYYY-MM-DD, defaults to today.")
@click.option("--notes", default="")
def add_expense(
    email: str,
    password: str,
    amount: str,
    description: str,
    category_name: str,
    expense_date: str,
    notes: str,
) -> None:
    """Record an expense."""

    with _signed_in(email, password) as ctx:
        view = ctx.expenses(failure_policy=FailurePolicy.SURFACE)

        async def _run() -> Optional[str]:
            await view.refresh()
            category = _find_category(view.categories, category_name)
            return await view.create_expense(
                {
                    "amount": amount,
                    "description": description,
                    "category_id": category.id,
                    "date": expense_date,
                    "notes": notes,
                }
            )

        try:
            record_id = asyncio.run(_run())
        except ValidationError as exc:
            raise click.ClickException(_validation_message(exc)) from exc
        click.echo(f"Expense added: {_raise_if_failed(record_id, view.error, 'expense')}")


@cli.command("add-budget")
@_email_option
@_password_option
@click.option("--category", "category_name", required=True, help="Category name.")
@click.option("--amount", required=True)
@click.option(
    "--period", type=click.Choice(["weekly", "monthly"]), default="monthly", show_default=True
)
def add_budget(email: str, password: str, category_name: str, amount: str, period: str) -> None:
    """Create a budget starting today."""

    with _signed_in(email, password) as ctx:
        view = ctx.budgets(failure_policy=FailurePolicy.SURFACE)

        async def _run() -> Optional[str]:
            await view.refresh()
            category = _find_category(view.categories, category_name)
            return await view.create_budget(
                {"category_id": category.id, "amount": amount, "period": period}
            )

        try:
            record_id = asyncio.run(_run())
        except ValidationError as exc:
            raise click.ClickException(_validation_message(exc)) from exc
        click.echo(f"Budget added: {_raise_if_failed(record_id, view.error, 'budget')}")


@cli.command("add-goal")
@_email_option
@_password_option
@click.option("--title", required=True)
@click.option("--target", "target_amount", required=True, help="Target amount.")
@click.option("--by", "target_date", required=True, help="Target date, YYYY-MM-DD.")
def add_goal(email: str, password: str, title: str, target_amount: str, target_date: str) -> None:
    """Create a savings goal."""

    with _signed_in(email, password) as ctx:
        view = ctx.goals(failure_policy=FailurePolicy.SURFACE)
        try:
            record_id = asyncio.run(
                view.create_goal(
                    {"title": title, "target_amount": target_amount, "target_date": target_date}
                )
            )
        except ValidationError as exc:
            raise click.ClickException(_validation_message(exc)) from exc
        click.echo(f"Goal added: {_raise_if_failed(record_id, view.error, 'goal')}")


@cli.command()
@_email_option
@_password_option
def summary(email: str, password: str) -> None:
    """Print the dashboard metrics."""

    with _signed_in(email, password) as ctx:
        view = ctx.dashboard(failure_policy=FailurePolicy.SURFACE)
        if not asyncio.run(view.refresh()):
            raise click.ClickException(view.error or "Could not load dashboard")
        data = view.summary()

        click.echo(f"Spent this month: {data.monthly_spend:.2f}")
        click.echo(
            f"Budgets: {data.budget_count} ({data.over_budget_count} over)  Goals: {data.goal_count}"
        )
        if data.spend_by_category:
            click.echo("By category:")
            for entry in data.spend_by_category:
                click.echo(f"  {entry.name:<20} {entry.total:>10.2f}")
        if data.budget_rows:
            click.echo("Budgets this month:")
            for row in data.budget_rows:
                progress = row.progress
                click.echo(
                    f"  {row.category_name:<20} {progress.spent:>10.2f} / {progress.amount:.2f}"
                    f"  [{row.status}]"
                )
        if data.recent_expenses:
            click.echo("Recent expenses:")
            for expense in data.recent_expenses:
                click.echo(
                    f"  {expense.date.isoformat()}  {expense.description:<24} {expense.amount:>10.2f}"
                )


if __name__ == "__main__":  # pragma: no cover
    cli()
