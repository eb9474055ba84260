"""Savings goals view controller."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..domain.gateway import Collection, Order
from ..domain.records import GoalRecord
from ..errors import ConflictError, NotFoundError, RequestError, ValidationError
from ..logging_config import get_logger
from ..models._base import utcnow
from ..services.goals import GoalProgress, advanced_amount, goal_progress
from .base import ViewController
from .forms import GoalForm, GoalIncrementForm

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GoalRow:
    goal: GoalRecord
    progress: GoalProgress


class GoalsController(ViewController):
    """Goals ordered by target date, with progress increments."""

    name = "goals"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.goals: list[GoalRecord] = []

    async def _fetch(self, user_id: str) -> list[GoalRecord]:
        rows = await self._call(
            self.gateway.select,
            Collection.SAVINGS_GOALS,
            filters={"user_id": user_id},
            order=Order("target_date"),
        )
        return [GoalRecord.from_row(row) for row in rows]

    def _apply(self, snapshot: list[GoalRecord]) -> None:
        self.goals = snapshot

    def rows(self) -> list[GoalRow]:
        today = self.today()
        return [GoalRow(goal=goal, progress=goal_progress(goal, today)) for goal in self.goals]

    def _find(self, goal_id: str) -> Optional[GoalRecord]:
        return next((goal for goal in self.goals if goal.id == goal_id), None)

    async def create_goal(self, data: Mapping[str, Any]) -> Optional[str]:
        form = GoalForm.from_mapping(data)
        if not form.validate():
            raise ValidationError(form.errors)

        user_id = self._current_user_id("create")
        if user_id is None:
            return None
        record_id = await self._insert(Collection.SAVINGS_GOALS, form.to_record(user_id=user_id))
        if record_id is not None:
            logger.info("Savings goal created", extra={"record_id": record_id})
            await self.refresh()
        return record_id

    async def add_progress(self, goal_id: str, amount: Decimal | str) -> bool:
        """Add ``amount`` to a goal's saved total.

        The new total is computed from the in-memory value and written only
        if the stored value still equals it; a concurrent change makes the
        write fail with ``ConflictError`` and the list is reloaded instead.
        """

        form = GoalIncrementForm.from_mapping({"amount": amount})
        if not form.validate():
            raise ValidationError(form.errors)

        goal = self._find(goal_id)
        if goal is None:
            self._fail("update", NotFoundError(f"savings goal {goal_id} is not loaded"))
            return False

        new_amount = advanced_amount(goal, form.amount)  # type: ignore[arg-type]
        try:
            await self._call(
                self.gateway.update,
                Collection.SAVINGS_GOALS,
                goal.id,
                {"current_amount": new_amount, "updated_at": utcnow()},
                expected={"current_amount": goal.current_amount},
            )
        except ConflictError as exc:
            await self.refresh()
            self._fail("update", exc)
            return False
        except RequestError as exc:
            self._fail("update", exc)
            return False

        self.goals = [
            replace(item, current_amount=new_amount) if item.id == goal.id else item
            for item in self.goals
        ]
        return True

    async def delete_goal(self, goal_id: str) -> bool:
        deleted = await self._delete(
            Collection.SAVINGS_GOALS, goal_id, "Are you sure you want to delete this savings goal?"
        )
        if deleted:
            self.goals = [goal for goal in self.goals if goal.id != goal_id]
        return deleted
