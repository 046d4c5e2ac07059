import asyncio
from typing import Any

from loguru import logger

from medicare.domain.exceptions import PaymentError
from medicare.payments.razorpay import RazorpayCheckout
from medicare.ui.ports import Notifier


class PaymentService:
    """Runs one checkout and tells the user how it ended.

    The appointment itself is never modified here; its payment status only
    changes on the server once verification succeeds.
    """

    def __init__(self, checkout: RazorpayCheckout, notifier: Notifier) -> None:
        self._checkout = checkout
        self._notifier = notifier

    async def pay(self, appointment_id: str, *, is_test: bool | None = None) -> bool:
        outcome: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

        async def on_success(data: Any) -> None:
            if not outcome.done():
                outcome.set_result(data)

        async def on_error(error: PaymentError) -> None:
            if not outcome.done():
                outcome.set_exception(error)

        await self._checkout.start_payment(appointment_id, on_success, on_error, is_test=is_test)

        try:
            await outcome
        except PaymentError as exc:
            logger.warning("Payment failed for appointment {}: {}", appointment_id, exc.reason)
            self._notifier.error(f"Payment failed: {exc.reason}")
            return False

        logger.info("Payment completed for appointment {}", appointment_id)
        self._notifier.success("Payment completed successfully!")
        return True
