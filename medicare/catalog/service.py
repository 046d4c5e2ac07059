from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from medicare.api.client import ApiClient, unwrap_data
from medicare.domain.exceptions import ApiError
from medicare.domain.models import Doctor, MedicalTest

_DOCTORS = TypeAdapter(list[Doctor])
_TESTS = TypeAdapter(list[MedicalTest])
_DOCTOR = TypeAdapter(Doctor)
_STRINGS = TypeAdapter(list[str])


def _items(payload: Any, key: str) -> Any:
    """Accept both a bare list and a ``{"<key>": [...]}`` object."""
    data = unwrap_data(payload)
    if isinstance(data, dict):
        return data.get(key, [])
    return data or []


def _parse(adapter: TypeAdapter[Any], data: Any) -> Any:
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise ApiError(200, f"Unexpected catalog response: {exc}") from exc


class CatalogService:
    """Read-only browsing of doctors and diagnostic tests."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list_doctors(
        self,
        *,
        search: str | None = None,
        specialization: str | None = None,
        min_rating: float | None = None,
        max_fee: float | None = None,
    ) -> list[Doctor]:
        payload = await self._client.get(
            "/doctors",
            {
                "search": search,
                "specialization": specialization,
                "minRating": min_rating,
                "maxFee": max_fee,
            },
        )
        doctors = _parse(_DOCTORS, _items(payload, "doctors"))
        logger.info("Loaded {} doctor(s)", len(doctors))
        return doctors

    async def get_doctor(self, doctor_id: str) -> Doctor:
        payload = await self._client.get(f"/doctors/{doctor_id}")
        return _parse(_DOCTOR, unwrap_data(payload))

    async def specializations(self) -> list[str]:
        payload = await self._client.get("/doctors/specializations")
        return _parse(_STRINGS, _items(payload, "specializations"))

    async def list_tests(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[MedicalTest]:
        payload = await self._client.get(
            "/tests",
            {
                "search": search,
                "category": category,
                "minPrice": min_price,
                "maxPrice": max_price,
            },
        )
        tests = _parse(_TESTS, _items(payload, "tests"))
        logger.info("Loaded {} test(s)", len(tests))
        return tests

    async def categories(self) -> list[str]:
        payload = await self._client.get("/tests/categories")
        return _parse(_STRINGS, _items(payload, "categories"))
