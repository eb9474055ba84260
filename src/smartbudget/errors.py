"""Error taxonomy shared by the gateway, forms and view controllers."""

from __future__ import annotations


class SmartBudgetError(Exception):
    """Base class for all application errors."""


class ValidationError(SmartBudgetError):
    """Form input was malformed or missing; raised before any request is issued."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(self._summary())

    def _summary(self) -> str:
        parts = [f"{field}: {'; '.join(messages)}" for field, messages in self.errors.items()]
        return "Invalid input (" + ", ".join(parts) + ")" if parts else "Invalid input"


class RequestError(SmartBudgetError):
    """The data gateway reported a failure (auth, network, constraint, ...)."""

    def __init__(self, message: str, *, collection: str | None = None):
        self.message = message
        self.collection = collection
        super().__init__(message)


class NotFoundError(RequestError):
    """An update or delete targeted a record that is no longer present."""


class ConflictError(RequestError):
    """A guarded update found the stored value changed since it was read."""


class AuthError(RequestError):
    """The auth client rejected a sign-in or sign-up attempt."""
