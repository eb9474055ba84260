"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.gateway import SQLModelGateway
from .logging_config import get_logger, setup_logging
from .services.auth import LocalAuthClient
from .session import SessionContext
from .views import (
    AuthController,
    BudgetsController,
    DashboardController,
    ExpensesController,
    GoalsController,
)

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Wires configuration, storage, auth and the principal-scoped gateway.

    View controllers are built on demand and share the same session and
    gateway, so a sign-out is seen by every view at once.
    """

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    auth: LocalAuthClient
    session: SessionContext
    gateway: SQLModelGateway

    def _view_kwargs(self, overrides: dict[str, Any]) -> dict[str, Any]:
        allowed = {"clock", "confirm", "failure_policy"}
        unexpected = set(overrides) - allowed
        if unexpected:
            raise TypeError(f"Unexpected view options: {', '.join(sorted(unexpected))}")
        return overrides

    def dashboard(self, **options: Any) -> DashboardController:
        return DashboardController(
            self.gateway,
            self.session,
            recent_limit=self.config.RECENT_EXPENSES,
            **self._view_kwargs(options),
        )

    def expenses(self, **options: Any) -> ExpensesController:
        return ExpensesController(self.gateway, self.session, **self._view_kwargs(options))

    def budgets(self, **options: Any) -> BudgetsController:
        return BudgetsController(self.gateway, self.session, **self._view_kwargs(options))

    def goals(self, **options: Any) -> GoalsController:
        return GoalsController(self.gateway, self.session, **self._view_kwargs(options))

    def auth_view(self, *, signing_up: bool = False) -> AuthController:
        return AuthController(self.auth, signing_up=signing_up)

    def close(self) -> None:
        self.session.close()
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None, *, configure_logging: bool = False
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()
    if configure_logging:
        setup_logging(config)

    engine, session_factory = bootstrap_database(config)
    auth = LocalAuthClient(session_factory)
    session = SessionContext(auth)
    session.start()
    gateway = SQLModelGateway(session_factory, principal=auth.current_user_id)

    logger.info("Application context ready", extra={"database": str(engine.url)})
    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        auth=auth,
        session=session,
        gateway=gateway,
    )
