import asyncio
from typing import Any, Awaitable, Callable

import httpx
from loguru import logger

from medicare.domain.exceptions import ApiError, UnauthorizedError
from medicare.session.store import SessionStore
from medicare.ui.ports import Navigator, Notifier

GENERIC_ERROR_MESSAGE = "An error occurred"


def extract_error_message(response: httpx.Response) -> str | None:
    """Return the server's ``message`` field from a JSON error body, if any."""
    try:
        body: Any = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class RequestAuthorizer:
    """Attaches the session credential to requests and reacts to auth loss.

    Install on an ``httpx.AsyncClient`` through :meth:`event_hooks`. A 401
    clears the session and schedules a redirect to ``login_path`` after
    ``redirect_delay`` seconds; every other failure status is reported to the
    notifier and raised as :class:`ApiError`. Requests are never retried.
    """

    def __init__(
        self,
        store: SessionStore,
        navigator: Navigator,
        notifier: Notifier,
        *,
        login_path: str = "/login",
        redirect_delay: float = 0.1,
    ) -> None:
        self._store = store
        self._navigator = navigator
        self._notifier = notifier
        self._login_path = login_path
        self._redirect_delay = redirect_delay
        self._pending_redirect: asyncio.TimerHandle | None = None

    @property
    def redirect_scheduled(self) -> bool:
        return self._pending_redirect is not None

    def event_hooks(self) -> dict[str, list[Callable[..., Awaitable[None]]]]:
        return {"request": [self.on_request], "response": [self.on_response]}

    async def on_request(self, request: httpx.Request) -> None:
        token = self._store.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
            logger.debug("Attached bearer credential to {} {}", request.method, request.url.path)
        else:
            logger.debug("No credential for {} {}", request.method, request.url.path)

    async def on_response(self, response: httpx.Response) -> None:
        if not response.is_error:
            return

        await response.aread()
        message = extract_error_message(response)

        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning(
                "Unauthorized response from {} {}, clearing session",
                response.request.method,
                response.request.url.path,
            )
            self._store.logout()
            self._schedule_login_redirect()
            raise UnauthorizedError(message or "Unauthorized")

        self.report_failure(message)
        raise ApiError(response.status_code, message or GENERIC_ERROR_MESSAGE)

    def report_failure(self, message: str | None = None) -> None:
        self._notifier.error(message or GENERIC_ERROR_MESSAGE)

    def _schedule_login_redirect(self) -> None:
        if self._pending_redirect is not None:
            return
        loop = asyncio.get_running_loop()
        self._pending_redirect = loop.call_later(self._redirect_delay, self._redirect_to_login)

    def _redirect_to_login(self) -> None:
        self._pending_redirect = None
        self._navigator.replace(self._login_path)
