from typing import Any, Awaitable

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from medicare.admin.forms import DoctorForm, MedicalTestForm, UserForm
from medicare.api.client import ApiClient, unwrap_data
from medicare.booking.draft import AdminAppointmentForm
from medicare.domain.exceptions import MedicareError
from medicare.domain.models import Appointment, Doctor, MedicalTest, User
from medicare.ui.ports import Notifier

_USERS = TypeAdapter(list[User])
_DOCTORS = TypeAdapter(list[Doctor])
_TESTS = TypeAdapter(list[MedicalTest])
_APPOINTMENTS = TypeAdapter(list[Appointment])


class AdminService:
    """Back-office management of users, doctors, tests and appointments.

    Listing methods return an empty list when the API call fails; mutations
    return whether they succeeded. Failures have already been reported to
    the user by the request authorizer, successes are reported here.
    """

    def __init__(self, client: ApiClient, notifier: Notifier) -> None:
        self._client = client
        self._notifier = notifier

    async def dashboard_stats(self) -> dict[str, Any]:
        try:
            payload = await self._client.get("/admin/dashboard")
        except MedicareError as exc:
            logger.warning("Could not load admin dashboard: {}", exc)
            return {}
        data = unwrap_data(payload)
        return data if isinstance(data, dict) else {}

    async def list_users(self) -> list[User]:
        return await self._list("/admin/users", "users", _USERS)

    async def list_doctors(self) -> list[Doctor]:
        return await self._list("/admin/doctors", "doctors", _DOCTORS)

    async def list_tests(self) -> list[MedicalTest]:
        return await self._list("/admin/tests", "tests", _TESTS)

    async def list_appointments(self) -> list[Appointment]:
        return await self._list("/admin/appointments", "appointments", _APPOINTMENTS)

    async def create_user(self, form: UserForm) -> bool:
        return await self._mutate(
            self._client.post("/admin/users", form.to_create_json()), "User created successfully"
        )

    async def update_user(self, user_id: str, form: UserForm) -> bool:
        return await self._mutate(
            self._client.put(f"/admin/users/{user_id}", form.to_update_json()),
            "User updated successfully",
        )

    async def delete_user(self, user_id: str) -> bool:
        return await self._mutate(
            self._client.delete(f"/admin/users/{user_id}"), "User deleted successfully"
        )

    async def create_doctor(self, form: DoctorForm) -> bool:
        return await self._mutate(
            self._client.post("/admin/doctors", form.to_json()), "Doctor created successfully"
        )

    async def update_doctor(self, doctor_id: str, form: DoctorForm) -> bool:
        return await self._mutate(
            self._client.put(f"/admin/doctors/{doctor_id}", form.to_json()),
            "Doctor updated successfully",
        )

    async def delete_doctor(self, doctor_id: str) -> bool:
        return await self._mutate(
            self._client.delete(f"/admin/doctors/{doctor_id}"), "Doctor deleted successfully"
        )

    async def create_test(self, form: MedicalTestForm) -> bool:
        return await self._mutate(
            self._client.post("/admin/tests", form.to_json()), "Test created successfully"
        )

    async def update_test(self, test_id: str, form: MedicalTestForm) -> bool:
        return await self._mutate(
            self._client.put(f"/admin/tests/{test_id}", form.to_json()),
            "Test updated successfully",
        )

    async def delete_test(self, test_id: str) -> bool:
        return await self._mutate(
            self._client.delete(f"/admin/tests/{test_id}"), "Test deleted successfully"
        )

    async def create_appointment(self, form: AdminAppointmentForm) -> bool:
        return await self._mutate(
            self._client.post("/admin/appointments", form.to_payload().to_json()),
            "Appointment created successfully",
        )

    async def update_appointment(self, appointment_id: str, form: AdminAppointmentForm) -> bool:
        return await self._mutate(
            self._client.put(f"/admin/appointments/{appointment_id}", form.to_payload().to_json()),
            "Appointment updated successfully",
        )

    async def delete_appointment(self, appointment_id: str) -> bool:
        return await self._mutate(
            self._client.delete(f"/admin/appointments/{appointment_id}"),
            "Appointment deleted successfully",
        )

    async def _list(self, path: str, key: str, adapter: TypeAdapter[Any]) -> Any:
        try:
            payload = await self._client.get(path)
        except MedicareError as exc:
            logger.warning("Could not load {}: {}", path, exc)
            return []

        data = unwrap_data(payload)
        if isinstance(data, dict):
            data = data.get(key, [])
        try:
            return adapter.validate_python(data or [])
        except ValidationError as exc:
            logger.warning("Unexpected response from {}: {}", path, exc)
            return []

    async def _mutate(self, call: Awaitable[Any], success_message: str) -> bool:
        try:
            await call
        except MedicareError as exc:
            logger.warning("Admin action failed: {}", exc)
            return False
        self._notifier.success(success_message)
        return True
