class MedicareError(Exception):
    """Base exception for all client-side errors."""


class ApiError(MedicareError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API request failed ({status_code}): {message}")


class UnauthorizedError(ApiError):
    """Raised when the API rejects the session credential."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(401, message)


class ApiUnavailableError(MedicareError):
    """Raised when the API is unreachable or not responding."""


class SessionStorageError(MedicareError):
    """Raised when the persisted session blob cannot be decoded."""


class DraftValidationError(MedicareError):
    """Raised when a booking draft is missing a required field."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(reason)


class PaymentError(MedicareError):
    """Raised when a payment cannot be started or completed."""

    def __init__(self, reason: str, appointment_id: str | None = None) -> None:
        self.reason = reason
        self.appointment_id = appointment_id
        super().__init__(reason)


class PaymentCancelledError(PaymentError):
    """Raised when the user closes the checkout without paying."""

    def __init__(self, appointment_id: str | None = None) -> None:
        super().__init__("Payment cancelled by user", appointment_id=appointment_id)
