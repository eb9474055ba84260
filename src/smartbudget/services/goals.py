"""Savings goal calculations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from ..domain.records import CENTS, GoalRecord
from .aggregation import ZERO

HUNDRED = Decimal("100")
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


def days_left(goal: GoalRecord, today: date) -> int:
    """Whole days from ``today`` to the goal's target date; negative once it has passed."""

    return (goal.target_date - today).days


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class SavingsPace:
    """Recommended amounts to put aside to reach a goal on time."""

    days_left: int
    remaining: Decimal
    daily: Decimal
    weekly: Decimal
    monthly: Decimal

    @property
    def is_overdue(self) -> bool:
        return self.days_left < 0

    @property
    def days_overdue(self) -> int:
        return abs(self.days_left) if self.days_left < 0 else 0


def recommended_savings_pace(goal: GoalRecord, today: date) -> SavingsPace:
    """Daily/weekly/monthly pace needed to close the gap by the target date.

    ``remaining`` is not floored and goes negative once the goal is exceeded;
    the paces are floored at zero. With no days left every pace is zero.
    """

    left = days_left(goal, today)
    remaining = goal.target_amount - goal.current_amount
    if left <= 0:
        return SavingsPace(
            days_left=left, remaining=remaining, daily=ZERO, weekly=ZERO, monthly=ZERO
        )

    daily = remaining / left
    return SavingsPace(
        days_left=left,
        remaining=remaining,
        daily=_cents(max(ZERO, daily)),
        weekly=_cents(max(ZERO, daily * DAYS_PER_WEEK)),
        monthly=_cents(max(ZERO, daily * DAYS_PER_MONTH)),
    )


@dataclass(frozen=True, slots=True)
class GoalProgress:
    goal_id: str
    percentage: Decimal
    is_completed: bool
    pace: SavingsPace

    @property
    def display_percentage(self) -> Decimal:
        """Percentage clamped to 100 for progress bars."""
        return min(HUNDRED, self.percentage)


def goal_progress(goal: GoalRecord, today: date) -> GoalProgress:
    """Completion percentage (unclamped), completion flag and savings pace."""

    if goal.target_amount > ZERO:
        percentage = goal.current_amount / goal.target_amount * HUNDRED
    else:
        percentage = HUNDRED
    return GoalProgress(
        goal_id=goal.id,
        percentage=percentage,
        is_completed=percentage >= HUNDRED,
        pace=recommended_savings_pace(goal, today),
    )


def advanced_amount(goal: GoalRecord, delta: Decimal) -> Decimal:
    """New ``current_amount`` after adding a positive ``delta``."""

    if delta <= ZERO:
        raise ValueError("Progress increments must be positive")
    return goal.current_amount + delta


__all__ = [
    "GoalProgress",
    "SavingsPace",
    "advanced_amount",
    "days_left",
    "goal_progress",
    "recommended_savings_pace",
]
