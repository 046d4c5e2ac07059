from loguru import logger
from pydantic import ValidationError

from medicare.api.client import ApiClient
from medicare.config import RazorpayConfig
from medicare.domain.exceptions import (
    ApiError,
    MedicareError,
    PaymentCancelledError,
    PaymentError,
)
from medicare.domain.models import (
    CheckoutOptions,
    PaymentConfirmation,
    PaymentOrderResponse,
    PaymentVerifyResponse,
)
from medicare.payments.ports import CheckoutWidget, ErrorCallback, SuccessCallback


def format_amount(amount: float) -> str:
    """Convert ``500`` → ``₹500`` for display."""
    if float(amount).is_integer():
        return f"₹{int(amount)}"
    return f"₹{amount}"


def amount_in_paise(amount: float) -> int:
    """Razorpay expects amounts in the smallest currency unit."""
    return round(amount * 100)


def _as_payment_error(exc: MedicareError, appointment_id: str) -> PaymentError:
    if isinstance(exc, PaymentError):
        return exc
    reason = exc.message if isinstance(exc, ApiError) else str(exc)
    return PaymentError(reason, appointment_id=appointment_id)


class RazorpayCheckout:
    """Creates Razorpay orders through the API and hands them to the checkout widget."""

    def __init__(
        self,
        client: ApiClient,
        widget: CheckoutWidget,
        config: RazorpayConfig | None = None,
    ) -> None:
        self._client = client
        self._widget = widget
        self._config = config or RazorpayConfig()

    async def create_order(
        self, appointment_id: str, *, is_test: bool = False
    ) -> PaymentOrderResponse:
        payload = await self._client.post(
            "/payments/razorpay/order",
            {"appointmentId": appointment_id, "isTest": is_test},
        )
        try:
            return PaymentOrderResponse.model_validate(payload)
        except ValidationError as exc:
            raise PaymentError(
                f"Unexpected order response: {exc}", appointment_id=appointment_id
            ) from exc

    async def verify(
        self,
        payment_id: str,
        confirmation: PaymentConfirmation,
        *,
        is_test: bool = False,
    ) -> PaymentVerifyResponse:
        payload = await self._client.post(
            "/payments/razorpay/verify",
            {"paymentId": payment_id, **confirmation.model_dump(), "isTest": is_test},
        )
        try:
            return PaymentVerifyResponse.model_validate(payload)
        except ValidationError as exc:
            raise PaymentError(f"Unexpected verification response: {exc}") from exc

    async def start_payment(
        self,
        appointment_id: str,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        *,
        is_test: bool | None = None,
    ) -> None:
        """Open the checkout for ``appointment_id``.

        Every outcome is delivered through ``on_success`` (with the verified
        payment data) or ``on_error``; nothing is raised to the caller.
        """
        test_mode = self._config.test_mode if is_test is None else is_test
        try:
            if not self._widget.is_loaded():
                raise PaymentError("Razorpay SDK not loaded", appointment_id=appointment_id)

            response = await self.create_order(appointment_id, is_test=test_mode)
            if not response.success or response.data is None:
                raise PaymentError(
                    response.message or "Could not create payment order",
                    appointment_id=appointment_id,
                )

            order_data = response.data
            key = order_data.key or order_data.order.key
            if not key:
                raise PaymentError(
                    "Razorpay key not found in response", appointment_id=appointment_id
                )

            options = CheckoutOptions(
                key=key,
                amount=order_data.order.amount,
                currency=order_data.order.currency,
                name=self._config.merchant_name,
                description=self._config.description,
                order_id=order_data.order.id,
                notes={"appointmentId": appointment_id},
                theme_color=self._config.theme_color,
            )
        except MedicareError as exc:
            logger.warning("Could not start payment for appointment {}: {}", appointment_id, exc)
            await on_error(_as_payment_error(exc, appointment_id))
            return

        async def handle_payment(confirmation: PaymentConfirmation) -> None:
            try:
                result = await self.verify(
                    order_data.payment_id, confirmation, is_test=test_mode
                )
            except MedicareError as exc:
                await on_error(_as_payment_error(exc, appointment_id))
                return
            if result.success:
                await on_success(result.data)
            else:
                await on_error(
                    PaymentError(
                        result.message or "Payment verification failed",
                        appointment_id=appointment_id,
                    )
                )

        async def handle_dismiss() -> None:
            await on_error(PaymentCancelledError(appointment_id=appointment_id))

        logger.info("Opening checkout for order {}", order_data.order.id)
        await self._widget.open(options, handle_payment, handle_dismiss)
