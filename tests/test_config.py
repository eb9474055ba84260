"""Configuration safeguards."""

from __future__ import annotations

import pytest

from smartbudget import config as cfg
from smartbudget.config import BaseConfig


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.setenv("SMARTBUDGET_DATA_DIR", str(tmp_path / "instance"))
    for name in (
        "SMARTBUDGET_DATABASE_URL",
        "SMARTBUDGET_DEV_MODE",
        "SMARTBUDGET_LOG_LEVEL",
        "SMARTBUDGET_RECENT_EXPENSES",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_use_sqlite_in_data_dir(env, tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "instance").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'smartbudget.db'}"
    assert config.is_sqlite
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}
    assert config.RECENT_EXPENSES == 5
    assert config.LOG_LEVEL == "INFO"


def test_production_mode_needs_no_extra_settings(env):
    env.setenv("SMARTBUDGET_DEV_MODE", "false")

    config = BaseConfig()

    assert config.DEV_MODE is False
    assert not hasattr(config, "SECRET_KEY")


def test_non_sqlite_url_has_no_sqlite_options(env):
    env.setenv("SMARTBUDGET_DATABASE_URL", "postgresql://localhost/smartbudget")

    config = BaseConfig()

    assert not config.is_sqlite
    assert config.sqlalchemy_engine_options() == {}


@pytest.mark.parametrize("value", ["0", "-2", "five"])
def test_recent_expenses_must_be_positive_integer(env, value):
    env.setenv("SMARTBUDGET_RECENT_EXPENSES", value)

    with pytest.raises(ValueError, match="SMARTBUDGET_RECENT_EXPENSES"):
        BaseConfig()


def test_recent_expenses_override(env):
    env.setenv("SMARTBUDGET_RECENT_EXPENSES", "10")

    assert BaseConfig().RECENT_EXPENSES == 10


def test_test_config_skips_wal(env):
    assert cfg.TestConfig().SQLITE_PRAGMAS == {"foreign_keys": "on"}
