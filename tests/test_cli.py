"""Command line interface tests."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from smartbudget.cli import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.delenv("SMARTBUDGET_DATABASE_URL", raising=False)
    monkeypatch.delenv("SMARTBUDGET_RECENT_EXPENSES", raising=False)
    return CliRunner(
        env={
            "SMARTBUDGET_DATA_DIR": str(tmp_path / "cli-data"),
            "SMARTBUDGET_DEV_MODE": "true",
            "SMARTBUDGET_EMAIL": "cli@example.com",
            "SMARTBUDGET_PASSWORD": "secret123",
        }
    )


@pytest.fixture
def registered(runner):
    result = runner.invoke(cli, ["register", "--name", "Cli User"])
    assert result.exit_code == 0, result.output
    return runner


def test_init_db(runner, tmp_path):
    result = runner.invoke(cli, ["init-db"])

    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    assert (tmp_path / "cli-data" / "smartbudget.db").exists()


def test_register_twice_fails(registered):
    result = registered.invoke(cli, ["register", "--name", "Cli User"])

    assert result.exit_code == 1
    assert "User already registered" in result.output


def test_full_flow_prints_summary(registered):
    commands = [
        ["add-expense", "--amount", "12.50", "--description", "Lunch", "--category", "food & dining"],
        ["add-expense", "--amount", "7.50", "--description", "Bus", "--category", "Transportation"],
        ["add-budget", "--category", "Food & Dining", "--amount", "10", "--period", "weekly"],
        ["add-goal", "--title", "Vacation", "--target", "1500", "--by", "2099-12-31"],
    ]
    for args in commands:
        result = registered.invoke(cli, args)
        assert result.exit_code == 0, result.output

    result = registered.invoke(cli, ["summary"])

    assert result.exit_code == 0, result.output
    assert "Spent this month: 20.00" in result.output
    assert "Budgets: 1 (1 over)  Goals: 1" in result.output
    assert "Food & Dining" in result.output
    assert "[over]" in result.output
    assert "Lunch" in result.output


def test_wrong_password_shows_friendly_message(registered):
    result = registered.invoke(cli, ["summary", "--password", "not-the-password"])

    assert result.exit_code == 1
    assert "Incorrect email or password" in result.output


def test_unknown_category_is_a_usage_error(registered):
    result = registered.invoke(
        cli, ["add-expense", "--amount", "1", "--description", "x", "--category", "Pets"]
    )

    assert result.exit_code == 2
    assert "Unknown category" in result.output


def test_invalid_amount_is_reported(registered):
    result = registered.invoke(
        cli, ["add-expense", "--amount=-4", "--description", "x", "--category", "Other"]
    )

    assert result.exit_code == 1
    assert "amount: Amount must be greater than zero." in result.output
