from typing import Any

from loguru import logger
from pydantic import ValidationError

from medicare.api.client import ApiClient, unwrap_data
from medicare.domain.exceptions import ApiError, MedicareError
from medicare.domain.models import User
from medicare.session.store import SessionStore
from medicare.ui.ports import Navigator


class AuthService:
    """Login, registration and logout on top of the session store."""

    def __init__(
        self,
        client: ApiClient,
        store: SessionStore,
        navigator: Navigator,
        *,
        home_path: str = "/",
    ) -> None:
        self._client = client
        self._store = store
        self._navigator = navigator
        self._home_path = home_path

    async def login(self, username: str, password: str) -> User | None:
        """Authenticate and populate the session. Returns the user, or None on failure."""
        logger.info("Logging in")
        try:
            payload = await self._client.post(
                "/auth/login", {"username": username, "password": password}
            )
            user, token = self._parse_credentials(payload)
        except MedicareError as exc:
            logger.warning("Login failed: {}", exc)
            return None

        self._store.login(user, token)
        return user

    async def register(self, username: str, email: str, password: str) -> bool:
        try:
            await self._client.post(
                "/auth/register",
                {"username": username, "email": email, "password": password},
            )
        except MedicareError as exc:
            logger.warning("Registration failed: {}", exc)
            return False
        logger.info("Registered new account")
        return True

    async def refresh(self, refresh_token: str) -> bool:
        """Exchange ``refresh_token`` for a new access token on the current user.

        A user object in the response replaces the stored one. Returns False,
        leaving the session untouched, when nobody is logged in or the exchange
        fails.
        """
        current = self._store.user
        if current is None:
            logger.warning("Refresh skipped: no user in session")
            return False
        try:
            payload = await self._client.post("/auth/refresh", {"refresh_token": refresh_token})
            data = self._credential_data(payload, "Refresh")
            token = self._parse_token(data, "Refresh")
            user = self._parse_user(data["user"], "Refresh") if data.get("user") else current
        except MedicareError as exc:
            logger.warning("Token refresh failed: {}", exc)
            return False

        self._store.login(user, token)
        logger.info("Access token refreshed")
        return True

    def logout(self) -> None:
        self._store.logout()
        self._navigator.push(self._home_path)

    def update_profile(self, **changes: Any) -> None:
        self._store.update_user(**changes)

    def _parse_credentials(self, payload: Any) -> tuple[User, str]:
        data = self._credential_data(payload, "Login")
        return self._parse_user(data.get("user"), "Login"), self._parse_token(data, "Login")

    @staticmethod
    def _credential_data(payload: Any, action: str) -> dict[str, Any]:
        data = unwrap_data(payload)
        if not isinstance(data, dict):
            raise ApiError(200, f"{action} response has no data")
        return data

    @staticmethod
    def _parse_token(data: dict[str, Any], action: str) -> str:
        token = data.get("token") or data.get("accessToken")
        if not isinstance(token, str) or not token:
            raise ApiError(200, f"{action} response has no token")
        return token

    @staticmethod
    def _parse_user(raw: Any, action: str) -> User:
        try:
            return User.model_validate(raw)
        except ValidationError as exc:
            raise ApiError(200, f"{action} response has an invalid user: {exc}") from exc
