import asyncio
from enum import Enum
from typing import Callable, TypeVar

from loguru import logger

from medicare.domain.models import Role, Session
from medicare.session.store import SessionStore
from medicare.ui.ports import Navigator

T = TypeVar("T")


class GuardState(str, Enum):
    PENDING = "pending"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class RouteGuard:
    """Gates a protected view on session state and an optional role.

    The guard starts ``PENDING`` and renders nothing until :meth:`evaluate`
    has seen the store finish rehydrating. Denials always resolve to a
    history-replacing navigation: to ``login_path`` when there is no usable
    session, to ``home_path`` when the role does not match.

    Once authorized, the guard follows the store and re-checks on every change
    until :meth:`close` is called. A denial ends the guarded view, so the
    guard stops following the store as soon as it redirects.
    """

    def __init__(
        self,
        store: SessionStore,
        navigator: Navigator,
        *,
        require_role: Role | None = None,
        login_path: str = "/login",
        home_path: str = "/",
        readiness_timeout: float = 0.1,
    ) -> None:
        self._store = store
        self._navigator = navigator
        self._require_role = require_role
        self._login_path = login_path
        self._home_path = home_path
        self._readiness_timeout = readiness_timeout
        self._state = GuardState.PENDING
        self._redirected_to: str | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def state(self) -> GuardState:
        return self._state

    async def evaluate(self) -> GuardState:
        if not self._store.ready:
            try:
                await asyncio.wait_for(
                    self._store.wait_until_ready(), timeout=self._readiness_timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "Session not rehydrated after {}s, evaluating guard anyway",
                    self._readiness_timeout,
                )

        self._check(self._store.session)
        if self._state is GuardState.AUTHORIZED and self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._check)
        return self._state

    def render(self, view: Callable[[], T]) -> T | None:
        """Return ``view()`` when authorized, otherwise None."""
        if self._state is not GuardState.AUTHORIZED:
            return None
        return view()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _check(self, session: Session) -> None:
        if not (session.is_authenticated and session.token and session.user):
            self._deny(self._login_path)
            return

        if self._require_role is not None and session.user.role != self._require_role:
            logger.info(
                "Role {} required, user has {}",
                self._require_role.value,
                session.user.role.value,
            )
            self._deny(self._home_path)
            return

        self._state = GuardState.AUTHORIZED
        self._redirected_to = None

    def _deny(self, redirect_to: str) -> None:
        if self._state is GuardState.DENIED and self._redirected_to == redirect_to:
            return
        self._state = GuardState.DENIED
        self._redirected_to = redirect_to
        self.close()
        self._navigator.replace(redirect_to)
