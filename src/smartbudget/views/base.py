"""Shared plumbing for the per-feature view controllers."""

from __future__ import annotations

import asyncio
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from ..domain.gateway import Collection, DataGateway
from ..errors import RequestError
from ..logging_config import get_logger
from ..session import SessionContext

logger = get_logger(__name__)

T = TypeVar("T")

ConfirmCallback = Callable[[str], bool]
Clock = Callable[[], date]


class FailurePolicy(str, Enum):
    """How a view reacts when a gateway call fails.

    ``SILENT`` keeps the previous collection and only logs. ``SURFACE`` also
    stores the gateway's message in ``error`` for the view to display.
    """

    SILENT = "silent"
    SURFACE = "surface"


def always_confirm(prompt: str) -> bool:
    return True


class ViewController:
    """Loads a snapshot for one view and applies it unless a newer load started.

    Subclasses implement ``_fetch`` (issue the view's requests, return a
    snapshot) and ``_apply`` (replace in-memory state with that snapshot).
    """

    name = "view"
    default_failure_policy = FailurePolicy.SILENT

    def __init__(
        self,
        gateway: DataGateway,
        session: SessionContext,
        *,
        clock: Clock = date.today,
        failure_policy: Optional[FailurePolicy] = None,
        confirm: ConfirmCallback = always_confirm,
    ):
        self.gateway = gateway
        self.session = session
        self.clock = clock
        self.failure_policy = failure_policy or self.default_failure_policy
        self.confirm = confirm

        self.loading = False
        self.loaded = False
        self.error: Optional[str] = None
        self._generation = 0

    def today(self) -> date:
        return self.clock()

    @property
    def generation(self) -> int:
        return self._generation

    async def _call(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Run a blocking gateway call without stalling the event loop."""

        return await asyncio.to_thread(fn, *args, **kwargs)

    async def _fetch(self, user_id: str) -> Any:  # pragma: no cover - interface
        raise NotImplementedError

    def _apply(self, snapshot: Any) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def refresh(self) -> bool:
        """Reload the whole view; returns True when this load's result was applied.

        A load overtaken by a later ``refresh()`` is discarded so a slow
        response can never overwrite newer state.
        """

        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            try:
                user_id = self.session.require_user_id()
                snapshot = await self._fetch(user_id)
            except (RequestError, ValueError) as exc:
                if generation != self._generation:
                    logger.debug("Ignoring failure of superseded %s load", self.name)
                    return False
                self._fail("load", exc)
                return False

            if generation != self._generation:
                logger.debug(
                    "Discarding superseded %s load",
                    self.name,
                    extra={"generation": generation, "current": self._generation},
                )
                return False

            self._apply(snapshot)
            self.loaded = True
            self.error = None
            return True
        finally:
            # A newer load still in flight owns the flag.
            if generation == self._generation:
                self.loading = False

    def _fail(self, action: str, exc: Exception) -> None:
        logger.error(
            "%s %s failed: %s",
            self.name,
            action,
            exc,
            extra={"view": self.name, "action": action, "policy": self.failure_policy.value},
        )
        if self.failure_policy is FailurePolicy.SURFACE:
            self.error = getattr(exc, "message", None) or str(exc)

    def _current_user_id(self, action: str) -> Optional[str]:
        try:
            return self.session.require_user_id()
        except RequestError as exc:
            self._fail(action, exc)
            return None

    async def _insert(self, collection: Collection, record: dict[str, Any]) -> Optional[str]:
        try:
            return await self._call(self.gateway.insert, collection, record)
        except RequestError as exc:
            self._fail("create", exc)
            return None

    async def _delete(self, collection: Collection, record_id: str, prompt: str) -> bool:
        """Confirm, then hard-delete; returns True only when the record is gone."""

        if not self.confirm(prompt):
            logger.debug("Delete cancelled", extra={"view": self.name, "record_id": record_id})
            return False
        try:
            await self._call(self.gateway.delete, collection, record_id)
        except RequestError as exc:
            self._fail("delete", exc)
            return False
        return True
