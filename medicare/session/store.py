import asyncio
from typing import Any, Callable

from loguru import logger

from medicare.domain.exceptions import SessionStorageError
from medicare.domain.models import Session, User
from medicare.session.codec import deserialize_session, serialize_session
from medicare.session.ports import SessionStorage

SessionListener = Callable[[Session], None]

DEFAULT_STORAGE_KEY = "auth-storage"


class SessionStore:
    """Single source of truth for who is logged in, durable across restarts.

    Every mutation is written to ``storage`` before listeners are notified, so
    any later read (including a fresh process) observes it.
    """

    def __init__(
        self,
        storage: SessionStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        autoload: bool = True,
    ) -> None:
        self._storage = storage
        self._key = key
        self._session = Session()
        self._listeners: list[SessionListener] = []
        self._ready = asyncio.Event()
        if autoload:
            self.rehydrate()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user

    @property
    def token(self) -> str | None:
        return self._session.token

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def wait_until_ready(self) -> None:
        """Block until :meth:`rehydrate` has completed at least once."""
        await self._ready.wait()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` after every mutation. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def login(self, user: User, token: str) -> None:
        logger.info("Logged in as user id={} role={}", user.id, user.role.value)
        self._set(Session(user=user, token=token, is_authenticated=True))

    def logout(self) -> None:
        if self._session != Session():
            logger.info("Logged out")
        self._set(Session())

    def update_user(self, **changes: Any) -> None:
        current = self._session.user
        if current is None:
            return
        user = User.model_validate({**current.model_dump(), **changes})
        self._set(self._session.model_copy(update={"user": user}))

    def rehydrate(self) -> Session:
        """Load the persisted session, repairing inconsistent flags."""
        raw = self._storage.read(self._key)
        session = Session()
        if raw is not None:
            try:
                session = deserialize_session(raw)
            except SessionStorageError as exc:
                logger.warning("Ignoring unreadable persisted session: {}", exc)

        if session.token and not session.is_authenticated:
            logger.warning("Persisted session had a token but was not flagged authenticated")
            session = session.model_copy(update={"is_authenticated": True})
        elif not session.token and session.is_authenticated:
            logger.warning("Persisted session was flagged authenticated without a token")
            session = session.model_copy(update={"is_authenticated": False})

        if session.token and session.user is None:
            logger.warning("Token exists but no user data found during rehydration")

        self._session = session
        self._ready.set()
        self._notify()
        return session

    def _set(self, session: Session) -> None:
        self._session = session
        if session == Session():
            self._storage.remove(self._key)
        else:
            self._storage.write(self._key, serialize_session(session))
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)
