import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# API payloads use camelCase keys; attributes stay snake_case.
_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
    frozen=True,
)


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class AppointmentType(str, Enum):
    CONSULTATION = "consultation"
    TEST = "test"


class AppointmentStatus(str, Enum):
    """Possible states of a booked appointment."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class User(BaseModel):
    """The logged-in identity as returned by the API."""

    model_config = _WIRE_CONFIG

    id: str
    username: str
    email: str = ""
    role: Role = Role.USER


class Session(BaseModel):
    """The client-held record of the logged-in identity and its credential."""

    model_config = _WIRE_CONFIG

    user: User | None = None
    token: str | None = None
    is_authenticated: bool = False


class AvailabilityWindow(BaseModel):
    """A weekly recurring interval during which a doctor accepts bookings."""

    model_config = _WIRE_CONFIG

    day: str
    start_time: dt.time
    end_time: dt.time
    is_available: bool = True

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _pad_hour(cls, value: Any) -> Any:
        # The API sometimes sends "9:00" instead of "09:00".
        if isinstance(value, str) and len(value.split(":", 1)[0]) == 1:
            return f"0{value}"
        return value

    @property
    def is_valid(self) -> bool:
        return self.start_time < self.end_time


class Doctor(BaseModel):
    model_config = _WIRE_CONFIG

    id: str
    name: str
    specialization: str = ""
    consultation_fee: float = 0
    rating: float = 0
    available_slots: list[AvailabilityWindow] = Field(default_factory=list)
    email: str | None = None
    phone: str | None = None
    experience: int | None = None
    bio: str | None = None
    qualifications: list[str] = Field(default_factory=list)


class MedicalTest(BaseModel):
    """A diagnostic test that can be booked."""

    model_config = _WIRE_CONFIG

    id: str
    name: str
    category: str = ""
    price: float = 0
    duration: int = 0
    description: str = ""
    preparation_instructions: str | None = None
    normal_range: str | None = None
    is_available: bool = True


class NavigationSeed(BaseModel):
    """State carried from a doctor or test listing into the booking flow."""

    model_config = _WIRE_CONFIG

    selected_type: AppointmentType | None = None
    selected_doctor: Doctor | None = None
    selected_test: MedicalTest | None = None


class BookingPayload(BaseModel):
    """Body of an appointment submission; absent fields are omitted on the wire."""

    model_config = _WIRE_CONFIG

    user_id: str | None = None
    appointment_type: AppointmentType
    doctor_id: str | None = None
    test_id: str | None = None
    appointment_date: dt.date
    appointment_time: dt.time
    patient_name: str | None = None
    symptoms: str | None = None
    notes: str | None = None
    total_amount: float = 0

    @field_serializer("appointment_time")
    def _serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Appointment(BaseModel):
    """A booked appointment as stored by the API."""

    model_config = _WIRE_CONFIG

    id: str
    appointment_type: AppointmentType
    doctor_id: str | None = None
    test_id: str | None = None
    appointment_date: dt.date | None = None
    appointment_time: str | None = None
    patient_name: str | None = None
    symptoms: str | None = None
    notes: str | None = None
    total_amount: float = 0
    status: AppointmentStatus = AppointmentStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING


class PaymentOrder(BaseModel):
    """An order created by the payment provider; ``amount`` is in paise."""

    model_config = _WIRE_CONFIG

    id: str
    amount: int
    currency: str = "INR"
    receipt: str = ""
    status: str = ""
    key: str | None = None


class PaymentOrderData(BaseModel):
    model_config = _WIRE_CONFIG

    order: PaymentOrder
    payment_id: str
    key: str | None = None


class PaymentOrderResponse(BaseModel):
    model_config = _WIRE_CONFIG

    success: bool
    message: str = ""
    data: PaymentOrderData | None = None


class PaymentConfirmation(BaseModel):
    """What the checkout widget hands back after a successful payment."""

    model_config = ConfigDict(frozen=True)

    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class PaymentVerifyResponse(BaseModel):
    model_config = _WIRE_CONFIG

    success: bool
    message: str = ""
    data: Any = None


class CheckoutOptions(BaseModel):
    """Options passed to the checkout widget when it is opened."""

    model_config = ConfigDict(frozen=True)

    key: str
    amount: int
    currency: str
    name: str
    description: str
    order_id: str
    notes: dict[str, str] = Field(default_factory=dict)
    theme_color: str = "#4F46E5"
