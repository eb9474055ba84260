"""Local authentication client.

Plays the role of the hosted backend's auth API: it owns credentials, the
current sign-in and the auth-state event stream. Creating an account also
creates the matching profile and its default categories.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from ..errors import AuthError
from ..infra.database import SessionFactory
from ..infra.gateway import seed_default_categories
from ..logging_config import get_logger
from ..models.auth_user import AuthUser
from ..models.profile import Profile
from ..models._base import utcnow

logger = get_logger(__name__)

_hasher = PasswordHasher()

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid login credentials"
FRIENDLY_INVALID_CREDENTIALS = (
    "Incorrect email or password. Please try again or create an account."
)


class AuthEventKind(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True, slots=True)
class Principal:
    """The authenticated user on whose behalf every record is scoped."""

    id: str
    email: str
    full_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AuthEvent:
    kind: AuthEventKind
    user: Optional[Principal]


AuthListener = Callable[[AuthEvent], None]


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def friendly_auth_message(exc: Exception, *, is_login: bool) -> str:
    """Message shown to the user for a failed sign-in or sign-up."""

    message = getattr(exc, "message", None) or str(exc)
    if is_login and message == INVALID_CREDENTIALS:
        return FRIENDLY_INVALID_CREDENTIALS
    return message


class LocalAuthClient:
    """Argon2-backed auth with an in-process auth-state event stream."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory
        self._listeners: list[AuthListener] = []
        self._current: Optional[Principal] = None

    # -- state -----------------------------------------------------------

    def current_user(self) -> Optional[Principal]:
        return self._current

    def current_user_id(self) -> Optional[str]:
        return self._current.id if self._current is not None else None

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _emit(self, event: AuthEvent) -> None:
        logger.info("Auth state changed", extra={"event": event.kind.value})
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.error("Auth listener failed for %s", event.kind.value, exc_info=True)

    # -- operations ------------------------------------------------------

    def sign_up(self, *, email: str, password: str, full_name: str = "") -> Principal:
        """Create credentials, profile and default categories, then sign in."""

        email = _normalize_email(email)
        if not email:
            raise AuthError("Email is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
        full_name = (full_name or "").strip() or None
        password_hash = _hasher.hash(password)

        try:
            with self.session_factory() as session:
                existing = session.exec(select(AuthUser).where(AuthUser.email == email)).first()
                if existing is not None:
                    raise AuthError("User already registered")
                user = AuthUser(email=email, password_hash=password_hash, last_sign_in_at=utcnow())
                session.add(user)
                session.flush()
                session.add(Profile(id=user.id, full_name=full_name))
                session.flush()
                seed_default_categories(session, user_id=user.id)
                principal = Principal(id=user.id, email=email, full_name=full_name)
        except SQLAlchemyError as exc:
            raise AuthError(str(exc)) from exc

        self._current = principal
        self._emit(AuthEvent(AuthEventKind.SIGNED_IN, principal))
        return principal

    def sign_in(self, *, email: str, password: str) -> Principal:
        """Verify credentials and make the account the current principal."""

        email = _normalize_email(email)
        if not email or not password:
            raise AuthError(INVALID_CREDENTIALS)

        try:
            with self.session_factory() as session:
                user = session.exec(select(AuthUser).where(AuthUser.email == email)).first()
                if user is None:
                    raise AuthError(INVALID_CREDENTIALS)
                try:
                    _hasher.verify(user.password_hash, password)
                except (VerifyMismatchError, InvalidHash, VerificationError) as exc:
                    raise AuthError(INVALID_CREDENTIALS) from exc
                user.last_sign_in_at = utcnow()
                session.add(user)
                profile = session.get(Profile, user.id)
                principal = Principal(
                    id=user.id,
                    email=user.email,
                    full_name=profile.full_name if profile is not None else None,
                )
        except SQLAlchemyError as exc:
            raise AuthError(str(exc)) from exc

        self._current = principal
        self._emit(AuthEvent(AuthEventKind.SIGNED_IN, principal))
        return principal

    def sign_out(self) -> None:
        if self._current is None:
            return
        self._current = None
        self._emit(AuthEvent(AuthEventKind.SIGNED_OUT, None))


__all__ = [
    "AuthEvent",
    "AuthEventKind",
    "FRIENDLY_INVALID_CREDENTIALS",
    "INVALID_CREDENTIALS",
    "LocalAuthClient",
    "Principal",
    "friendly_auth_message",
]
