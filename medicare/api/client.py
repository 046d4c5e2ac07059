from typing import Any

import httpx
from loguru import logger

from medicare.api.authorizer import RequestAuthorizer
from medicare.domain.exceptions import ApiError, ApiUnavailableError, MedicareError


def unwrap_data(payload: Any) -> Any:
    """Strip the ``{"success": ..., "data": ...}`` envelope the API wraps results in."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    cleaned = {k: v for k, v in params.items() if v is not None and v != ""}
    return cleaned or None


class ApiClient:
    """JSON client for the MediCare REST API.

    All traffic passes through the :class:`RequestAuthorizer` hooks, so
    callers only see decoded bodies or :class:`MedicareError` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        authorizer: RequestAuthorizer,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._authorizer = authorizer
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            event_hooks=authorizer.event_hooks(),
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            resp = await self._client.request(
                method, path, params=_clean_params(params), json=json
            )
        except MedicareError:
            raise
        except httpx.TransportError as exc:
            logger.warning("{} {} failed: {}", method, path, exc)
            self._authorizer.report_failure()
            raise ApiUnavailableError(f"{method} {path} failed: {exc}") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(resp.status_code, "Response body is not valid JSON") from exc

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None) -> Any:
        return await self.request("POST", path, json=data)

    async def put(self, path: str, data: Any = None) -> Any:
        return await self.request("PUT", path, json=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def resource(self, name: str) -> "ResourceAPI":
        return ResourceAPI(self, name)

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("API client closed")


class ResourceAPI:
    """Generic CRUD calls for one REST collection (``/<name>``)."""

    def __init__(self, client: ApiClient, name: str) -> None:
        self._client = client
        self._name = name.strip("/")

    async def get_all(self, params: dict[str, Any] | None = None) -> Any:
        return await self._client.get(f"/{self._name}", params)

    async def get_by_id(self, resource_id: str) -> Any:
        return await self._client.get(f"/{self._name}/{resource_id}")

    async def create(self, data: Any) -> Any:
        return await self._client.post(f"/{self._name}", data)

    async def update(self, resource_id: str, data: Any) -> Any:
        return await self._client.put(f"/{self._name}/{resource_id}", data)

    async def delete(self, resource_id: str) -> Any:
        return await self._client.delete(f"/{self._name}/{resource_id}")
