"""Session context: the current principal and its lifecycle."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from .errors import RequestError
from .logging_config import get_logger
from .services.auth import AuthEvent, AuthListener, Principal

logger = get_logger(__name__)

SessionListener = Callable[[Optional[Principal]], None]


class AuthClient(Protocol):
    """The slice of the auth backend the session needs."""

    def current_user(self) -> Optional[Principal]:  # pragma: no cover - interface
        ...

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:  # pragma: no cover - interface
        ...


class SessionContext:
    """Holds the signed-in principal (or none) and a loading flag.

    ``start()`` reads the current sign-in and subscribes to auth-state
    changes; ``close()`` unsubscribes. Controllers receive this object
    explicitly instead of reaching for a global.
    """

    def __init__(self, auth_client: AuthClient):
        self._auth = auth_client
        self.user: Optional[Principal] = None
        self.loading = True
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._listeners: list[SessionListener] = []

    def __enter__(self) -> SessionContext:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self.started:
            return
        self._unsubscribe = self._auth.on_auth_state_change(self._handle_event)
        self.user = self._auth.current_user()
        self.loading = False
        logger.debug("Session started", extra={"user_id": self.user_id})

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.debug("Session closed")

    def _handle_event(self, event: AuthEvent) -> None:
        self.user = event.user
        self.loading = False
        for listener in list(self._listeners):
            listener(self.user)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` whenever the principal changes; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user is not None else None

    def require_user_id(self) -> str:
        """Return the current user id or raise if nobody is signed in."""

        if self.user is None:
            raise RequestError("Not authenticated")
        return self.user.id
