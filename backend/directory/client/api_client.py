"""HTTP proxy for the employee API, used by the list view controller."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import aiohttp

from directory.core.config import Settings
from directory.models.employee import Employee

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Normalized failure from any API call.

    ``status`` is None when the request never produced an HTTP response.
    """

    def __init__(self, message: str, errors: list[str] | None = None, status: int | None = None) -> None:
        self.message = message
        self.errors = list(errors or [])
        self.status = status
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404 or "not found" in self.message.lower()


class EmployeeApiClient:
    def __init__(self, base_url: str, timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> EmployeeApiClient:
        return cls(settings.API_BASE_URL, timeout=settings.API_TIMEOUT_SECONDS)

    async def list_employees(self) -> list[Employee]:
        body = await self._request("GET", "", fallback="Failed to fetch employees")
        return [Employee.model_validate(item) for item in body.get("data") or []]

    async def get_employee(self, employee_id: str) -> Employee:
        body = await self._request("GET", self._item_path(employee_id), fallback="Failed to fetch employee")
        return Employee.model_validate(body["data"])

    async def create_employee(self, payload: dict[str, Any]) -> Employee:
        body = await self._request("POST", "", json=payload, fallback="Failed to create employee")
        return Employee.model_validate(body["data"])

    async def update_employee(self, employee_id: str, payload: dict[str, Any]) -> Employee:
        body = await self._request(
            "PUT",
            self._item_path(employee_id),
            json=payload,
            fallback="Failed to update employee",
        )
        return Employee.model_validate(body["data"])

    async def delete_employee(self, employee_id: str) -> None:
        await self._request("DELETE", self._item_path(employee_id), fallback="Failed to delete employee")

    @staticmethod
    def _item_path(employee_id: str) -> str:
        return "/" + quote(str(employee_id).strip(), safe="")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, json=json) as response:
                    body = await self._read_body(response)
                    if response.status >= 400 or not body.get("ok", False):
                        raise ApiError(
                            body.get("message") or fallback,
                            errors=body.get("errors"),
                            status=response.status,
                        )
                    return body
        except ApiError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            logger.warning("%s %s failed: %s", method, url, err)
            raise ApiError(fallback) from err

    @staticmethod
    async def _read_body(response: Any) -> dict[str, Any]:
        try:
            body = await response.json(content_type=None)
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
