from typing import Callable

from loguru import logger

from medicare.admin.service import AdminService
from medicare.api.authorizer import RequestAuthorizer
from medicare.api.client import ApiClient
from medicare.booking.datetime_helpers import resolve_timezone
from medicare.booking.service import BookingService
from medicare.catalog.service import CatalogService
from medicare.config import AppConfig, StorageBackend
from medicare.payments.adapters.unavailable import UnavailableCheckoutWidget
from medicare.payments.ports import CheckoutWidget
from medicare.payments.razorpay import RazorpayCheckout
from medicare.payments.service import PaymentService
from medicare.routing.guard import RouteGuard
from medicare.routing.routes import guard_for
from medicare.session.adapters.file import FileSessionStorage
from medicare.session.adapters.memory import InMemorySessionStorage
from medicare.session.ports import SessionStorage
from medicare.session.service import AuthService
from medicare.session.store import SessionStore
from medicare.ui.navigation import HistoryNavigator
from medicare.ui.toasts import ToastQueue


def _build_file_storage(config: AppConfig) -> SessionStorage:
    return FileSessionStorage(config.session.storage_dir)


def _build_memory_storage(config: AppConfig) -> SessionStorage:
    return InMemorySessionStorage()


_STORAGE_BUILDERS: dict[StorageBackend, Callable[[AppConfig], SessionStorage]] = {
    StorageBackend.FILE: _build_file_storage,
    StorageBackend.MEMORY: _build_memory_storage,
}


class MedicareApp:
    """Every client-side service, wired to one session store and one API client."""

    def __init__(self, config: AppConfig, widget: CheckoutWidget | None = None) -> None:
        self.config = config
        session = config.session

        storage = _STORAGE_BUILDERS[session.storage](config)
        self.store = SessionStore(storage, key=session.storage_key)
        self.navigator = HistoryNavigator()
        self.toasts = ToastQueue()

        self.authorizer = RequestAuthorizer(
            self.store,
            self.navigator,
            self.toasts,
            login_path=session.login_path,
            redirect_delay=session.redirect_delay,
        )
        self.client = ApiClient(
            config.api.base_url, self.authorizer, timeout=config.api.timeout
        )

        self.auth = AuthService(
            self.client, self.store, self.navigator, home_path=session.home_path
        )
        self.catalog = CatalogService(self.client)
        self.booking = BookingService(
            self.client,
            self.catalog,
            self.store,
            self.navigator,
            self.toasts,
            clinic_tz=(
                resolve_timezone(config.clinic_timezone) if config.clinic_timezone else None
            ),
            login_path=session.login_path,
        )
        self.admin = AdminService(self.client, self.toasts)
        self.checkout = RazorpayCheckout(
            self.client, widget or UnavailableCheckoutWidget(), config.razorpay
        )
        self.payments = PaymentService(self.checkout, self.toasts)

    def guard(self, path: str) -> RouteGuard | None:
        """Guard for ``path``, or None when the path is public."""
        session = self.config.session
        return guard_for(
            path,
            self.store,
            self.navigator,
            login_path=session.login_path,
            home_path=session.home_path,
            readiness_timeout=session.readiness_timeout,
        )

    async def close(self) -> None:
        await self.client.close()


def build_app(
    config: AppConfig | None = None, *, widget: CheckoutWidget | None = None
) -> MedicareApp:
    """Build the client from ``config`` (loaded from the environment when omitted)."""
    config = config or AppConfig()
    logger.info(
        "Building MediCare client: api={}, session storage={}",
        config.api.base_url,
        config.session.storage.value,
    )
    return MedicareApp(config, widget)
