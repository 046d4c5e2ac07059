import datetime as dt
import json
from zoneinfo import ZoneInfo

import httpx
import pytest
from pytest_httpx import HTTPXMock

from medicare.api.client import ApiClient
from medicare.booking.draft import AppointmentDraft
from medicare.booking.service import BookingService
from medicare.catalog.service import CatalogService
from medicare.domain.models import (
    AppointmentStatus,
    AppointmentType,
    AvailabilityWindow,
    Doctor,
    NavigationSeed,
    User,
)
from medicare.session.store import SessionStore
from medicare.ui.navigation import HistoryNavigator
from medicare.ui.toasts import ToastQueue

API_URL = "https://api.medicare.test/api"

DOCTOR_JSON = {
    "id": "d-1",
    "name": "Dr. Rao",
    "specialization": "Cardiology",
    "consultationFee": 500,
    "rating": 4.7,
    "availableSlots": [{"day": "Monday", "startTime": "10:00", "endTime": "13:00"}],
}
TEST_JSON = {"id": "t-1", "name": "CBC", "category": "Blood", "price": 300, "duration": 15}


@pytest.fixture
def booking(
    api_client: ApiClient, store: SessionStore, navigator: HistoryNavigator, toasts: ToastQueue
) -> BookingService:
    return BookingService(api_client, CatalogService(api_client), store, navigator, toasts)


def _ready_draft() -> AppointmentDraft:
    draft = AppointmentDraft([Doctor(id="d-1", name="Dr. Rao", consultation_fee=500)])
    draft.select_doctor("d-1")
    draft.appointment_date = dt.date(2026, 10, 26)
    draft.appointment_time = dt.time(11, 0)
    draft.symptoms = "Chest pain"
    return draft


def _booked(**overrides: object) -> dict:
    appointment = {
        "id": "ap-1",
        "appointmentType": "consultation",
        "doctorId": "d-1",
        "appointmentDate": "2026-10-26",
        "appointmentTime": "11:00",
        "totalAmount": 500,
        "status": "pending",
        "paymentStatus": "pending",
    }
    appointment.update(overrides)
    return appointment


class TestNewDraft:
    @pytest.mark.asyncio
    async def test_loads_catalog_and_applies_seed(
        self, booking: BookingService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=f"{API_URL}/doctors", json={"data": [DOCTOR_JSON]})
        httpx_mock.add_response(url=f"{API_URL}/tests", json={"data": {"tests": [TEST_JSON]}})
        seed = NavigationSeed.model_validate(
            {"selectedType": "test", "selectedTest": TEST_JSON}
        )

        draft = await booking.new_draft(seed)

        assert [d.id for d in draft.doctors] == ["d-1"]
        assert draft.appointment_type is AppointmentType.TEST
        assert draft.total_amount == 300

    @pytest.mark.asyncio
    async def test_catalog_failure_gives_empty_lists(
        self, booking: BookingService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=f"{API_URL}/doctors", status_code=500)

        draft = await booking.new_draft()

        assert draft.doctors == []
        assert draft.tests == []


class TestAvailableSlots:
    def test_uses_selected_doctor(self, booking: BookingService) -> None:
        doctor = Doctor(
            id="d-1",
            name="Dr. Rao",
            available_slots=[
                AvailabilityWindow(day="Monday", start_time="10:00", end_time="12:00")
            ],
        )
        draft = AppointmentDraft([doctor])
        draft.select_doctor("d-1")
        draft.appointment_date = dt.date(2026, 10, 26)

        slots = booking.available_slots(draft, now=dt.datetime(2026, 10, 19, 8, 0))

        assert slots == ["10:00", "11:00"]

    # 04:30 UTC is 18:30 on 2026-10-18 in Honolulu and 18:30 on 2026-10-19 in Kiritimati.
    @pytest.mark.parametrize(
        ("zone", "expected"),
        [
            ("Pacific/Honolulu", [f"{h:02d}:00" for h in range(9, 21)]),
            ("Pacific/Kiritimati", ["19:00", "20:00"]),
        ],
    )
    def test_today_is_decided_in_the_booking_zone(
        self,
        zone: str,
        expected: list[str],
        api_client: ApiClient,
        store: SessionStore,
        navigator: HistoryNavigator,
        toasts: ToastQueue,
    ) -> None:
        booking = BookingService(
            api_client,
            CatalogService(api_client),
            store,
            navigator,
            toasts,
            clinic_tz=ZoneInfo(zone),
        )
        draft = AppointmentDraft()
        draft.select_type(AppointmentType.TEST)
        draft.appointment_date = dt.date(2026, 10, 19)
        instant = dt.datetime(2026, 10, 19, 4, 30, tzinfo=dt.timezone.utc)

        assert booking.available_slots(draft, now=instant) == expected

    def test_naive_now_is_used_as_local_time(self, booking: BookingService) -> None:
        draft = AppointmentDraft()
        draft.select_type(AppointmentType.TEST)
        draft.appointment_date = dt.date(2026, 10, 19)

        slots = booking.available_slots(draft, now=dt.datetime(2026, 10, 19, 18, 30))

        assert slots == ["19:00", "20:00"]


class TestSubmit:
    @pytest.mark.asyncio
    async def test_requires_login(
        self,
        booking: BookingService,
        navigator: HistoryNavigator,
        toasts: ToastQueue,
        httpx_mock: HTTPXMock,
    ) -> None:
        result = await booking.submit(_ready_draft())

        assert result is None
        assert toasts.messages == ["Please log in to book an appointment"]
        assert navigator.current_path == "/login"
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_invalid_draft_is_not_sent(
        self,
        booking: BookingService,
        store: SessionStore,
        toasts: ToastQueue,
        patient: User,
        httpx_mock: HTTPXMock,
    ) -> None:
        store.login(patient, "tok")
        draft = _ready_draft()
        draft.appointment_time = None

        assert await booking.submit(draft) is None
        assert toasts.messages == ["Please select a time"]
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_success_navigates_to_appointments(
        self,
        booking: BookingService,
        store: SessionStore,
        navigator: HistoryNavigator,
        toasts: ToastQueue,
        patient: User,
        httpx_mock: HTTPXMock,
    ) -> None:
        store.login(patient, "tok")
        httpx_mock.add_response(
            method="POST",
            url=f"{API_URL}/appointments",
            status_code=201,
            json={"success": True, "data": {"appointment": _booked()}},
        )

        appointment = await booking.submit(_ready_draft())

        assert appointment is not None
        assert appointment.id == "ap-1"
        assert appointment.status is AppointmentStatus.PENDING
        assert toasts.messages == ["Appointment booked successfully!"]
        assert navigator.current_path == "/appointments"
        request = httpx_mock.get_requests()[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {
            "appointmentType": "consultation",
            "doctorId": "d-1",
            "appointmentDate": "2026-10-26",
            "appointmentTime": "11:00",
            "symptoms": "Chest pain",
            "totalAmount": 500,
        }

    @pytest.mark.asyncio
    async def test_server_error_keeps_draft(
        self,
        booking: BookingService,
        store: SessionStore,
        navigator: HistoryNavigator,
        toasts: ToastQueue,
        patient: User,
        httpx_mock: HTTPXMock,
    ) -> None:
        store.login(patient, "tok")
        httpx_mock.add_response(status_code=409, json={"message": "Slot already booked"})
        draft = _ready_draft()

        assert await booking.submit(draft) is None
        assert toasts.messages == ["Slot already booked"]
        assert navigator.current_path == "/"
        assert draft.appointment_time == dt.time(11, 0)
        assert booking.is_submitting is False

    @pytest.mark.asyncio
    async def test_unparseable_response(
        self,
        booking: BookingService,
        store: SessionStore,
        toasts: ToastQueue,
        patient: User,
        httpx_mock: HTTPXMock,
    ) -> None:
        store.login(patient, "tok")
        httpx_mock.add_response(json={"success": True, "data": {"unexpected": True}})

        assert await booking.submit(_ready_draft()) is None
        assert toasts.messages == ["Failed to book appointment"]

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_ignored(
        self,
        booking: BookingService,
        store: SessionStore,
        patient: User,
        httpx_mock: HTTPXMock,
    ) -> None:
        store.login(patient, "tok")
        draft = _ready_draft()
        observed: list[object] = []

        async def respond(request: httpx.Request) -> httpx.Response:
            observed.append(booking.is_submitting)
            observed.append(await booking.submit(draft))
            return httpx.Response(201, json={"data": _booked()})

        httpx_mock.add_callback(respond)

        appointment = await booking.submit(draft)

        assert appointment is not None
        assert observed == [True, None]
        assert len(httpx_mock.get_requests()) == 1
        assert booking.is_submitting is False
