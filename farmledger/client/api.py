"""
API Client
Thin httpx wrappers around the /api/employee and /api/egg-inventory resources.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response or transport failure. ``message`` is safe to show users."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or []


class ResourceApi:
    """Request construction and status checking for one resource path."""

    resource_path = ""
    singular = "record"
    plural = "records"

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _request(
        self,
        method: str,
        fallback: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            response = await self.client.request(
                method,
                self.resource_path,
                params=params,
                json=json
            )
        except httpx.TimeoutException:
            raise ApiError(f"{fallback}: request timed out")
        except httpx.RequestError as e:
            raise ApiError(f"{fallback}: {str(e)}")

        if not response.is_success:
            message = fallback
            details: List[Dict[str, Any]] = []
            try:
                body = response.json()
                message = body.get("error") or fallback
                details = body.get("details") or []
            except (ValueError, AttributeError):
                # Not a JSON object; keep the generic message
                pass
            logger.debug("%s %s -> HTTP %s: %s", method, self.resource_path, response.status_code, message)
            raise ApiError(message, response.status_code, details)

        return response.json()

    @staticmethod
    def _params(**values: Any) -> Dict[str, Any]:
        """Drop unset query parameters."""
        return {key: value for key, value in values.items() if value not in (None, "")}

    async def get(self, record_id: str) -> Dict[str, Any]:
        return await self._request(
            "GET", f"Failed to fetch {self.singular}", params={"id": str(record_id)}
        )

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"Failed to create {self.singular}", json=data)

    async def update(self, record_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"Failed to update {self.singular}", params={"id": str(record_id)}, json=data
        )

    async def delete(self, record_id: str) -> Dict[str, Any]:
        return await self._request(
            "DELETE", f"Failed to delete {self.singular}", params={"id": str(record_id)}
        )


class EmployeeApi(ResourceApi):
    resource_path = "/api/employee"
    singular = "employee"
    plural = "employees"

    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get a page of employees: ``{"employees": [...], "pagination": {...}}``."""
        return await self._request(
            "GET",
            "Failed to fetch employees",
            params=self._params(page=page, limit=limit, search=search)
        )


class EggInventoryApi(ResourceApi):
    resource_path = "/api/egg-inventory"
    singular = "egg inventory"
    plural = "egg inventories"

    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get a page of inventories: ``{"inventories": [...], "pagination": {...}}``."""
        return await self._request(
            "GET",
            "Failed to fetch egg inventories",
            params=self._params(page=page, limit=limit, startDate=start_date, endDate=end_date)
        )
