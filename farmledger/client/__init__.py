"""
Python client for the FarmLedger API.

    async with FarmLedgerClient("http://localhost:8000") as ledger:
        page = await ledger.employees.list(page=1, search="asha")
        await ledger.eggs.create({"crack_eggs": 10, "jumbo_eggs": 20, "normal_eggs": 70})
"""
from typing import Optional

import httpx

from farmledger.client.api import ApiError, EggInventoryApi, EmployeeApi
from farmledger.client.cache import QueryCache, make_key
from farmledger.client.queries import (
    EggInventoryQueries,
    EmployeeQueries,
    Mutation,
    MutationInFlightError,
    Notifier,
    egg_inventory_keys,
    employee_keys,
)
from farmledger.config import settings


class FarmLedgerClient:
    """One HTTP connection pool and one cache shared by both resources."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        notifier: Optional[Notifier] = None,
        stale_time: Optional[float] = None,
        timeout: float = 30.0
    ):
        self._owns_http = http_client is None
        self.http = http_client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout
        )
        self.cache = QueryCache(stale_time)
        self.employees = EmployeeQueries(EmployeeApi(self.http), self.cache, notifier)
        self.eggs = EggInventoryQueries(EggInventoryApi(self.http), self.cache, notifier)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "FarmLedgerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = [
    "ApiError",
    "EggInventoryApi",
    "EggInventoryQueries",
    "EmployeeApi",
    "EmployeeQueries",
    "FarmLedgerClient",
    "Mutation",
    "MutationInFlightError",
    "Notifier",
    "QueryCache",
    "egg_inventory_keys",
    "employee_keys",
    "make_key",
]
