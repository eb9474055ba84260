"""Domain services: pure aggregation, budgeting and goal math, plus local auth."""

from .aggregation import (
    CategorySpend,
    filter_expenses,
    monthly_spend,
    resolve_category,
    spend_by_category,
    total_amount,
)
from .budgeting import (
    BudgetPeriodWindow,
    BudgetProgress,
    CalendarMonthWindow,
    ReferenceWindow,
    budget_progress,
    budget_status,
    compute_end_date,
    over_budget_count,
)
from .goals import GoalProgress, SavingsPace, goal_progress, recommended_savings_pace

__all__ = [
    "BudgetPeriodWindow",
    "BudgetProgress",
    "CalendarMonthWindow",
    "CategorySpend",
    "GoalProgress",
    "ReferenceWindow",
    "SavingsPace",
    "budget_progress",
    "budget_status",
    "compute_end_date",
    "filter_expenses",
    "goal_progress",
    "monthly_spend",
    "over_budget_count",
    "recommended_savings_pace",
    "resolve_category",
    "spend_by_category",
    "total_amount",
]
