from collections.abc import Iterator

import pytest
from loguru import logger

from medicare.api.authorizer import RequestAuthorizer
from medicare.api.client import ApiClient
from medicare.domain.models import Role, User
from medicare.session.adapters.memory import InMemorySessionStorage
from medicare.session.store import SessionStore
from medicare.ui.navigation import HistoryNavigator
from medicare.ui.toasts import ToastQueue

API_URL = "https://api.medicare.test/api"
REDIRECT_DELAY = 0.01


@pytest.fixture
def storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def store(storage: InMemorySessionStorage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def navigator() -> HistoryNavigator:
    return HistoryNavigator()


@pytest.fixture
def toasts() -> ToastQueue:
    return ToastQueue()


@pytest.fixture
def authorizer(
    store: SessionStore, navigator: HistoryNavigator, toasts: ToastQueue
) -> RequestAuthorizer:
    return RequestAuthorizer(store, navigator, toasts, redirect_delay=REDIRECT_DELAY)


@pytest.fixture
def api_client(authorizer: RequestAuthorizer) -> ApiClient:
    return ApiClient(API_URL, authorizer)


@pytest.fixture
def patient() -> User:
    return User(id="u-1", username="asha", email="asha@example.com", role=Role.USER)


@pytest.fixture
def admin() -> User:
    return User(id="a-1", username="root", email="root@example.com", role=Role.ADMIN)


@pytest.fixture
def warnings_logged() -> Iterator[list[str]]:
    """Messages loguru emits at WARNING or above while the test runs."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
