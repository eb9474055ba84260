"""Sign-in / sign-up view controller."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional

from ..errors import AuthError, ValidationError
from ..logging_config import get_logger
from ..services.auth import LocalAuthClient, Principal, friendly_auth_message
from .forms import AuthForm

logger = get_logger(__name__)


class AuthController:
    """Drives the auth form; errors are always shown to the user."""

    def __init__(self, auth_client: LocalAuthClient, *, signing_up: bool = False):
        self.auth_client = auth_client
        self.signing_up = signing_up
        self.loading = False
        self.error: Optional[str] = None

    def toggle_mode(self) -> None:
        self.signing_up = not self.signing_up
        self.error = None

    async def submit(self, data: Mapping[str, Any]) -> Optional[Principal]:
        """Sign in or sign up with ``data``; returns the principal or None on failure.

        Raises ``ValidationError`` for malformed input before contacting the
        auth backend.
        """

        form = AuthForm.from_mapping(data)
        if not form.validate(signing_up=self.signing_up):
            raise ValidationError(form.errors)

        self.loading = True
        self.error = None
        try:
            if self.signing_up:
                principal = await asyncio.to_thread(
                    self.auth_client.sign_up,
                    email=form.email,
                    password=form.password,
                    full_name=form.full_name,
                )
            else:
                principal = await asyncio.to_thread(
                    self.auth_client.sign_in, email=form.email, password=form.password
                )
        except AuthError as exc:
            self.error = friendly_auth_message(exc, is_login=not self.signing_up)
            logger.warning(
                "Authentication failed",
                extra={"mode": "sign_up" if self.signing_up else "sign_in", "reason": exc.message},
            )
            return None
        finally:
            self.loading = False

        logger.info("Authenticated", extra={"user_id": principal.id})
        return principal

    async def sign_out(self) -> None:
        await asyncio.to_thread(self.auth_client.sign_out)
