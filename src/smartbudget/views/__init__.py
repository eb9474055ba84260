"""View controllers: one per screen, each owning its loaded collections."""

from .auth import AuthController
from .base import FailurePolicy, ViewController
from .budgets import BudgetRow, BudgetsController
from .dashboard import DashboardController, DashboardSummary
from .expenses import ExpensesController
from .goals import GoalRow, GoalsController

__all__ = [
    "AuthController",
    "BudgetRow",
    "BudgetsController",
    "DashboardController",
    "DashboardSummary",
    "ExpensesController",
    "FailurePolicy",
    "GoalRow",
    "GoalsController",
    "ViewController",
]
