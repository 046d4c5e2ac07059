import datetime as dt

from loguru import logger
from pydantic import ValidationError

from medicare.api.client import ApiClient, unwrap_data
from medicare.booking.datetime_helpers import local_now
from medicare.booking.draft import AppointmentDraft
from medicare.booking.slots import slots_for_draft
from medicare.catalog.service import CatalogService
from medicare.domain.exceptions import DraftValidationError, MedicareError
from medicare.domain.models import Appointment, Doctor, MedicalTest, NavigationSeed
from medicare.session.store import SessionStore
from medicare.ui.ports import Navigator, Notifier


class BookingService:
    """Drives the booking form: catalog, slots, validation and submission."""

    def __init__(
        self,
        client: ApiClient,
        catalog: CatalogService,
        store: SessionStore,
        navigator: Navigator,
        notifier: Notifier,
        *,
        clinic_tz: dt.tzinfo | None = None,
        login_path: str = "/login",
    ) -> None:
        self._client = client
        self._catalog = catalog
        self._store = store
        self._navigator = navigator
        self._notifier = notifier
        self._clinic_tz = clinic_tz
        self._login_path = login_path
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    async def load_catalog(self) -> tuple[list[Doctor], list[MedicalTest]]:
        """Fetch doctors and tests for the selection lists; empty on failure."""
        try:
            doctors = await self._catalog.list_doctors()
            tests = await self._catalog.list_tests()
        except MedicareError as exc:
            logger.warning("Could not load booking catalog: {}", exc)
            return [], []
        return doctors, tests

    async def new_draft(self, seed: NavigationSeed | None = None) -> AppointmentDraft:
        doctors, tests = await self.load_catalog()
        draft = AppointmentDraft(doctors, tests)
        if seed is not None:
            draft.apply_seed(seed)
        return draft

    def available_slots(
        self, draft: AppointmentDraft, now: dt.datetime | None = None
    ) -> list[str]:
        return slots_for_draft(
            draft.appointment_type,
            draft.selected_doctor,
            draft.appointment_date,
            now=self._localize(now),
        )

    def _localize(self, now: dt.datetime | None) -> dt.datetime:
        """Express ``now`` in the booking zone; naive values are taken as already local."""
        if now is None:
            return local_now(self._clinic_tz)
        if now.tzinfo is None:
            return now
        return now.astimezone(self._clinic_tz)

    async def submit(self, draft: AppointmentDraft) -> Appointment | None:
        """Submit ``draft``. Returns the booked appointment, or None if nothing was booked.

        The draft is left untouched on every failure so the user can correct
        it and try again.
        """
        if self._submitting:
            logger.warning("Ignoring submit while a booking is already in flight")
            return None

        if self._store.user is None:
            self._notifier.error("Please log in to book an appointment")
            self._navigator.push(self._login_path)
            return None

        try:
            payload = draft.to_payload()
        except DraftValidationError as exc:
            logger.info("Booking draft rejected: field={}", exc.field)
            self._notifier.error(exc.reason)
            return None

        logger.info(
            "Submitting {} booking: date={}, time={}",
            payload.appointment_type.value,
            payload.appointment_date,
            payload.appointment_time,
        )
        self._submitting = True
        try:
            response = await self._client.post("/appointments", payload.to_json())
            data = unwrap_data(response)
            if isinstance(data, dict) and isinstance(data.get("appointment"), dict):
                data = data["appointment"]
            appointment = Appointment.model_validate(data)
        except MedicareError as exc:
            logger.warning("Booking failed: {}", exc)
            return None
        except ValidationError as exc:
            logger.warning("Booking response could not be parsed: {}", exc)
            self._notifier.error("Failed to book appointment")
            return None
        finally:
            self._submitting = False

        logger.info("Appointment booked: id={}", appointment.id)
        self._notifier.success("Appointment booked successfully!")
        self._navigator.push("/appointments")
        return appointment
