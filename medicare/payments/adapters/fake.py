from medicare.domain.models import CheckoutOptions, PaymentConfirmation
from medicare.payments.ports import DismissHandler, PaymentHandler


class FakeCheckoutWidget:
    """In-memory test double for the CheckoutWidget protocol.

    Set ``confirmation`` to have the next :meth:`open` pay immediately, or
    ``dismiss`` to have it close without paying. With neither set, the
    checkout stays open until :meth:`complete` or :meth:`close` is awaited.

    After calls, inspect ``opened`` to see the options that were passed.
    """

    def __init__(self) -> None:
        self.loaded: bool = True
        self.confirmation: PaymentConfirmation | None = None
        self.dismiss: bool = False
        self.opened: list[CheckoutOptions] = []

        self._on_payment: PaymentHandler | None = None
        self._on_dismiss: DismissHandler | None = None

    def is_loaded(self) -> bool:
        return self.loaded

    async def open(
        self,
        options: CheckoutOptions,
        on_payment: PaymentHandler,
        on_dismiss: DismissHandler,
    ) -> None:
        self.opened.append(options)
        self._on_payment = on_payment
        self._on_dismiss = on_dismiss
        if self.confirmation is not None:
            await self.complete(self.confirmation)
        elif self.dismiss:
            await self.close()

    async def complete(self, confirmation: PaymentConfirmation) -> None:
        if self._on_payment is None:
            raise RuntimeError("Checkout is not open")
        await self._on_payment(confirmation)

    async def close(self) -> None:
        if self._on_dismiss is None:
            raise RuntimeError("Checkout is not open")
        await self._on_dismiss()
