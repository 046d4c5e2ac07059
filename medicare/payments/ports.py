from typing import Any, Awaitable, Callable, Protocol

from medicare.domain.exceptions import PaymentError
from medicare.domain.models import CheckoutOptions, PaymentConfirmation

PaymentHandler = Callable[[PaymentConfirmation], Awaitable[None]]
DismissHandler = Callable[[], Awaitable[None]]
SuccessCallback = Callable[[Any], Awaitable[None]]
ErrorCallback = Callable[[PaymentError], Awaitable[None]]


class CheckoutWidget(Protocol):
    """The payment provider's checkout UI, seen through two callbacks."""

    def is_loaded(self) -> bool:
        """Whether the provider's SDK is available."""
        ...

    async def open(
        self,
        options: CheckoutOptions,
        on_payment: PaymentHandler,
        on_dismiss: DismissHandler,
    ) -> None:
        """Show the checkout.

        ``on_payment`` is awaited with the provider's confirmation when the
        user pays; ``on_dismiss`` when the user closes it without paying.
        """
        ...
