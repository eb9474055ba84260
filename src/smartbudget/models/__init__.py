"""SQLModel table exports."""

from .auth_user import AuthUser
from .budget import Budget, BudgetPeriod
from .category import Category
from .expense import Expense
from .profile import Profile
from .savings_goal import SavingsGoal

__all__ = [
    "AuthUser",
    "Budget",
    "BudgetPeriod",
    "Category",
    "Expense",
    "Profile",
    "SavingsGoal",
]
