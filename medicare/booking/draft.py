import datetime as dt
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from medicare.domain.exceptions import DraftValidationError
from medicare.domain.models import (
    AppointmentType,
    BookingPayload,
    Doctor,
    MedicalTest,
    NavigationSeed,
)


def normalize_optional(value: str | None) -> str | None:
    """Treat a missing or whitespace-only string as absent."""
    if value is None or not value.strip():
        return None
    return value


def compute_total_amount(
    appointment_type: AppointmentType,
    doctor_id: str | None,
    test_id: str | None,
    doctors: Sequence[Doctor],
    tests: Sequence[MedicalTest],
) -> float:
    """Fee of the selected doctor or price of the selected test; 0 if unresolved."""
    if appointment_type is AppointmentType.CONSULTATION and doctor_id:
        doctor = next((d for d in doctors if d.id == doctor_id), None)
        return doctor.consultation_fee if doctor else 0
    if appointment_type is AppointmentType.TEST and test_id:
        test = next((t for t in tests if t.id == test_id), None)
        return test.price if test else 0
    return 0


class AppointmentDraft:
    """In-progress state of the booking form.

    Both a doctor and a test may be remembered while the user switches
    between types, but only the one matching ``appointment_type`` counts
    toward the amount and ends up in the payload.
    """

    def __init__(
        self,
        doctors: Sequence[Doctor] = (),
        tests: Sequence[MedicalTest] = (),
        *,
        appointment_type: AppointmentType = AppointmentType.CONSULTATION,
    ) -> None:
        self.doctors: list[Doctor] = list(doctors)
        self.tests: list[MedicalTest] = list(tests)
        self.appointment_type = appointment_type
        self.doctor_id: str | None = None
        self.test_id: str | None = None
        self.appointment_date: dt.date | None = None
        self.appointment_time: dt.time | None = None
        self.patient_name: str | None = None
        self.symptoms: str | None = None
        self.notes: str | None = None

    def apply_seed(self, seed: NavigationSeed) -> None:
        """Pre-select what the user picked on a doctor or test listing."""
        if seed.selected_type is not None:
            self.appointment_type = seed.selected_type
        if seed.selected_doctor is not None:
            self._remember(self.doctors, seed.selected_doctor)
            self.doctor_id = seed.selected_doctor.id
        if seed.selected_test is not None:
            self._remember(self.tests, seed.selected_test)
            self.test_id = seed.selected_test.id

    def select_type(self, appointment_type: AppointmentType) -> None:
        self.appointment_type = appointment_type

    def select_doctor(self, doctor_id: str | None) -> None:
        self.doctor_id = doctor_id or None

    def select_test(self, test_id: str | None) -> None:
        self.test_id = test_id or None

    @property
    def selected_doctor(self) -> Doctor | None:
        return next((d for d in self.doctors if d.id == self.doctor_id), None)

    @property
    def selected_test(self) -> MedicalTest | None:
        return next((t for t in self.tests if t.id == self.test_id), None)

    @property
    def total_amount(self) -> float:
        return compute_total_amount(
            self.appointment_type, self.doctor_id, self.test_id, self.doctors, self.tests
        )

    def validate(self) -> None:
        """Raise :class:`DraftValidationError` for the first missing required field."""
        if self.appointment_type is AppointmentType.CONSULTATION and not self.doctor_id:
            raise DraftValidationError("doctorId", "Please select a doctor for consultation")
        if self.appointment_type is AppointmentType.TEST and not self.test_id:
            raise DraftValidationError("testId", "Please select a test")
        if self.appointment_date is None:
            raise DraftValidationError("appointmentDate", "Please select a date")
        if self.appointment_time is None:
            raise DraftValidationError("appointmentTime", "Please select a time")

    def to_payload(self) -> BookingPayload:
        self.validate()
        is_consultation = self.appointment_type is AppointmentType.CONSULTATION
        return BookingPayload(
            appointment_type=self.appointment_type,
            doctor_id=self.doctor_id if is_consultation else None,
            test_id=None if is_consultation else self.test_id,
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            patient_name=normalize_optional(self.patient_name),
            symptoms=normalize_optional(self.symptoms),
            notes=normalize_optional(self.notes),
            total_amount=self.total_amount,
        )

    @staticmethod
    def _remember(items: list, item: Doctor | MedicalTest) -> None:
        if all(existing.id != item.id for existing in items):
            items.append(item)


class AdminAppointmentForm(BaseModel):
    """Appointment fields as entered on the admin create/edit form."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    appointment_type: AppointmentType = AppointmentType.CONSULTATION
    doctor_id: str | None = None
    test_id: str | None = None
    appointment_date: dt.date
    appointment_time: dt.time
    patient_name: str | None = None
    symptoms: str | None = None
    notes: str | None = None
    total_amount: float = 0

    def to_payload(self) -> BookingPayload:
        is_consultation = self.appointment_type is AppointmentType.CONSULTATION
        return BookingPayload(
            user_id=self.user_id,
            appointment_type=self.appointment_type,
            doctor_id=normalize_optional(self.doctor_id) if is_consultation else None,
            test_id=None if is_consultation else normalize_optional(self.test_id),
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            patient_name=normalize_optional(self.patient_name),
            symptoms=normalize_optional(self.symptoms),
            notes=normalize_optional(self.notes),
            total_amount=self.total_amount,
        )
