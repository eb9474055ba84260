"""Form validation helpers.

Forms bind raw string input, validate it and expose typed values. Nothing
here talks to the gateway; controllers refuse to issue a request for a form
that does not validate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Optional

from ..models.budget import BudgetPeriod
from ..services.auth import MIN_PASSWORD_LENGTH
from ..services.budgeting import compute_end_date

MAX_AMOUNT = Decimal("99999999.99")  # NUMERIC(10, 2)
MAX_DESCRIPTION = 255
MAX_TITLE = 120


@dataclass(slots=True)
class _BaseForm:
    """Shared binding and error bookkeeping."""

    FIELDS: ClassVar[tuple[str, ...]] = ()

    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        self.raw_data = {}
        for key in self.FIELDS:
            value = data.get(key)
            if value is None:
                value_str = ""
            elif isinstance(value, str):
                value_str = value
            else:
                value_str = str(value)
            self.raw_data[key] = value_str

    def _raw(self, key: str) -> str:
        return self.raw_data.get(key, "").strip()

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    def _parse_amount(self, key: str, *, label: str = "Amount") -> Optional[Decimal]:
        raw = self._raw(key)
        if not raw:
            self._add_error(key, f"{label} is required.")
            return None
        try:
            parsed = Decimal(raw)
        except InvalidOperation:
            self._add_error(key, f"Enter a valid number for the {label.lower()}.")
            return None
        if not parsed.is_finite():
            self._add_error(key, f"Enter a valid number for the {label.lower()}.")
            return None
        if parsed <= 0:
            self._add_error(key, f"{label} must be greater than zero.")
            return None
        if parsed.as_tuple().exponent < -2:  # type: ignore[operator]
            self._add_error(key, f"{label} can have at most two decimal places.")
            return None
        if parsed > MAX_AMOUNT:
            self._add_error(key, f"{label} is too large.")
            return None
        return parsed

    def _parse_date(self, key: str, *, label: str, default: Optional[date] = None) -> Optional[date]:
        raw = self._raw(key)
        if not raw:
            if default is None:
                self._add_error(key, f"{label} is required.")
            return default
        try:
            return datetime.strptime(raw, "%Y-%m-%d").date()
        except ValueError:
            self._add_error(key, "Enter a valid date (YYYY-MM-DD).")
            return None

    def _parse_category(self, key: str = "category_id") -> Optional[str]:
        raw = self._raw(key)
        if not raw:
            self._add_error(key, "Category is required.")
            return None
        return raw


@dataclass(slots=True)
class ExpenseForm(_BaseForm):
    """Represents expense input prior to validation."""

    FIELDS: ClassVar[tuple[str, ...]] = ("amount", "description", "category_id", "date", "notes")

    amount: Optional[Decimal] = None
    description: str = ""
    category_id: Optional[str] = None
    date: Optional[date] = None
    notes: Optional[str] = None

    def validate(self, *, today: Optional[date] = None) -> bool:
        """Validate the bound data; a blank date defaults to ``today``."""

        self.errors.clear()
        self.amount = self._parse_amount("amount")

        self.description = self._raw("description")
        if not self.description:
            self._add_error("description", "Description is required.")
        elif len(self.description) > MAX_DESCRIPTION:
            self._add_error(
                "description", f"Description must be {MAX_DESCRIPTION} characters or fewer."
            )

        self.category_id = self._parse_category()
        self.date = self._parse_date("date", label="Date", default=today or date.today())
        self.notes = self._raw("notes") or None
        return not self.errors

    def to_record(self, *, user_id: str) -> dict[str, Any]:
        """Insert payload; the owner always comes from the session, never the form."""

        return {
            "user_id": user_id,
            "category_id": self.category_id,
            "amount": self.amount,
            "description": self.description,
            "notes": self.notes,
            "date": self.date,
        }


@dataclass(slots=True)
class BudgetForm(_BaseForm):
    """Budget input; the window is derived from today's date and the period."""

    FIELDS: ClassVar[tuple[str, ...]] = ("category_id", "amount", "period")

    category_id: Optional[str] = None
    amount: Optional[Decimal] = None
    period: BudgetPeriod = BudgetPeriod.MONTHLY

    def validate(self) -> bool:
        self.errors.clear()
        self.category_id = self._parse_category()
        self.amount = self._parse_amount("amount")

        period_raw = self._raw("period").lower() or BudgetPeriod.MONTHLY.value
        try:
            self.period = BudgetPeriod(period_raw)
        except ValueError:
            self._add_error("period", "Period must be weekly or monthly.")
        return not self.errors

    def to_record(self, *, user_id: str, today: date) -> dict[str, Any]:
        return {
            "user_id": user_id,
            "category_id": self.category_id,
            "amount": self.amount,
            "period": self.period.value,
            "start_date": today,
            "end_date": compute_end_date(today, self.period),
        }


@dataclass(slots=True)
class GoalForm(_BaseForm):
    FIELDS: ClassVar[tuple[str, ...]] = ("title", "target_amount", "target_date")

    title: str = ""
    target_amount: Optional[Decimal] = None
    target_date: Optional[date] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.title = self._raw("title")
        if not self.title:
            self._add_error("title", "Title is required.")
        elif len(self.title) > MAX_TITLE:
            self._add_error("title", f"Title must be {MAX_TITLE} characters or fewer.")
        self.target_amount = self._parse_amount("target_amount", label="Target amount")
        self.target_date = self._parse_date("target_date", label="Target date")
        return not self.errors

    def to_record(self, *, user_id: str) -> dict[str, Any]:
        return {
            "user_id": user_id,
            "title": self.title,
            "target_amount": self.target_amount,
            "current_amount": Decimal("0.00"),
            "target_date": self.target_date,
        }


@dataclass(slots=True)
class GoalIncrementForm(_BaseForm):
    """Amount added to a goal's saved total."""

    FIELDS: ClassVar[tuple[str, ...]] = ("amount",)

    amount: Optional[Decimal] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.amount = self._parse_amount("amount")
        return not self.errors


@dataclass(slots=True)
class AuthForm(_BaseForm):
    FIELDS: ClassVar[tuple[str, ...]] = ("email", "password", "full_name")

    email: str = ""
    password: str = ""
    full_name: str = ""

    def validate(self, *, signing_up: bool = False) -> bool:
        self.errors.clear()
        self.email = self._raw("email")
        if not self.email:
            self._add_error("email", "Email is required.")
        elif "@" not in self.email:
            self._add_error("email", "Enter a valid email address.")

        # Passwords are taken verbatim; surrounding spaces are significant.
        self.password = self.raw_data.get("password", "")
        if not self.password:
            self._add_error("password", "Password is required.")
        elif signing_up and len(self.password) < MIN_PASSWORD_LENGTH:
            self._add_error(
                "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )

        self.full_name = self._raw("full_name")
        if signing_up and not self.full_name:
            self._add_error("full_name", "Full name is required.")
        return not self.errors


__all__ = [
    "AuthForm",
    "BudgetForm",
    "ExpenseForm",
    "GoalForm",
    "GoalIncrementForm",
]
