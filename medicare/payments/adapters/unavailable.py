from medicare.domain.models import CheckoutOptions
from medicare.payments.ports import DismissHandler, PaymentHandler


class UnavailableCheckoutWidget:
    """Stand-in used when no checkout SDK is wired; every payment reports it as missing."""

    def is_loaded(self) -> bool:
        return False

    async def open(
        self,
        options: CheckoutOptions,
        on_payment: PaymentHandler,
        on_dismiss: DismissHandler,
    ) -> None:
        raise RuntimeError("Checkout SDK is not available")
