"""
Client Queries
Cached reads and notifying mutations over the API client.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from farmledger.client.api import ApiError, EggInventoryApi, EmployeeApi, ResourceApi
from farmledger.client.cache import QueryCache, QueryKey, make_key

logger = logging.getLogger(__name__)


class Notifier:
    """Receives success and error toasts. The default writes them to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class MutationInFlightError(Exception):
    """Raised when a mutation is called while its previous call is running."""


class Mutation:
    """
    A write operation with pending state and notifications.

    ``on_success``, when given, receives the response followed by the call
    arguments.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[Dict[str, Any]]],
        on_success: Optional[Callable[..., None]],
        success_message: Union[str, Callable[..., str]],
        notifier: Notifier
    ):
        self._fn = fn
        self._on_success = on_success
        self._success_message = success_message
        self._notifier = notifier
        self.is_pending = False

    async def __call__(self, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        if self.is_pending:
            raise MutationInFlightError("A previous request is still in progress")

        self.is_pending = True
        try:
            result = await self._fn(*args, **kwargs)
        except ApiError as e:
            self._notifier.error(e.message)
            raise
        finally:
            self.is_pending = False

        if self._on_success is not None:
            self._on_success(result, *args, **kwargs)
        message = self._success_message
        if callable(message):
            message = message(result, *args, **kwargs)
        self._notifier.success(message)
        return result


class ResourceKeys:
    """Cache key layout for one resource."""

    def __init__(self, root: str):
        self.all: QueryKey = (root,)

    def lists(self) -> QueryKey:
        return self.all + ("list",)

    def list(self, **params: Any) -> QueryKey:
        return make_key(*self.lists(), params=params)

    def details(self) -> QueryKey:
        return self.all + ("detail",)

    def detail(self, record_id: Any) -> QueryKey:
        return self.details() + (str(record_id),)


employee_keys = ResourceKeys("employees")
egg_inventory_keys = ResourceKeys("egg-inventories")


class ResourceQueries:
    """Reads, mutations and cache upkeep shared by both resources."""

    keys: ResourceKeys
    list_field = ""
    detail_field = ""
    label = ""

    def __init__(
        self,
        api: ResourceApi,
        cache: Optional[QueryCache] = None,
        notifier: Optional[Notifier] = None
    ):
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.notifier = notifier or Notifier()

        self.create = Mutation(
            api.create, self._after_create, f"{self.label} created successfully!", self.notifier
        )
        self.update = Mutation(
            api.update, self._after_update, f"{self.label} updated successfully!", self.notifier
        )
        self.delete = Mutation(
            api.delete, self._after_delete, f"{self.label} deleted successfully!", self.notifier
        )

    async def get(self, record_id: str) -> Dict[str, Any]:
        return await self.cache.fetch(
            self.keys.detail(record_id), lambda: self.api.get(record_id)
        )

    async def prefetch(self, record_id: str) -> None:
        """Warm the detail entry, e.g. on hover. Failures are only logged."""
        try:
            await self.get(record_id)
        except ApiError as e:
            logger.debug("Prefetch of %s failed: %s", record_id, e.message)

    def update_in_lists(self, record_id: str, changes: Mapping[str, Any]) -> int:
        """Merge ``changes`` into the matching row of every cached list page."""
        record_id = str(record_id)

        def apply(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
            if not data:
                return data
            rows = [
                {**row, **changes} if str(row.get("id")) == record_id else row
                for row in data.get(self.list_field, [])
            ]
            return {**data, self.list_field: rows}

        return self.cache.update_where(self.keys.lists(), apply)

    def remove_from_lists(self, record_id: str) -> int:
        """Drop the row from every cached list page that holds it."""
        record_id = str(record_id)

        def apply(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
            if not data:
                return data
            rows = data.get(self.list_field, [])
            kept = [row for row in rows if str(row.get("id")) != record_id]
            if len(kept) == len(rows):
                return data
            updated = {**data, self.list_field: kept}
            if "pagination" in data:
                pagination = dict(data["pagination"])
                pagination["total"] = max(pagination.get("total", 0) - 1, 0)
                updated["pagination"] = pagination
            return updated

        return self.cache.update_where(self.keys.lists(), apply)

    def _after_create(self, result: Dict[str, Any], data: Mapping[str, Any]) -> None:
        self.cache.invalidate(self.keys.lists())
        record = result.get(self.detail_field)
        if record:
            self.cache.set(self.keys.detail(record["id"]), {self.detail_field: record})

    def _after_update(
        self, result: Dict[str, Any], record_id: str, data: Mapping[str, Any]
    ) -> None:
        record = result.get(self.detail_field)
        if record:
            self.cache.set(self.keys.detail(record_id), {self.detail_field: record})
        else:
            self.cache.invalidate(self.keys.detail(record_id))
        self.cache.invalidate(self.keys.lists())

    def _after_delete(self, result: Dict[str, Any], record_id: str) -> None:
        self.cache.remove(self.keys.detail(record_id))
        self.cache.invalidate(self.keys.lists())


class EmployeeQueries(ResourceQueries):
    keys = employee_keys
    list_field = "employees"
    detail_field = "employee"
    label = "Employee"

    def __init__(
        self,
        api: EmployeeApi,
        cache: Optional[QueryCache] = None,
        notifier: Optional[Notifier] = None
    ):
        super().__init__(api, cache, notifier)
        self.delete_many = Mutation(
            self._delete_many,
            None,
            lambda result, ids: f"{len(result)} employees deleted successfully!",
            self.notifier
        )

    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.cache.fetch(
            self.keys.list(page=page, limit=limit, search=search),
            lambda: self.api.list(page=page, limit=limit, search=search)
        )

    async def _delete_many(self, ids: List[str]) -> List[Dict[str, Any]]:
        """
        Delete one at a time; the first failure stops the batch.

        Cache entries of the records already deleted are dropped even when a
        later delete fails.
        """
        results: List[Dict[str, Any]] = []
        deleted: List[str] = []
        try:
            for record_id in ids:
                results.append(await self.api.delete(record_id))
                deleted.append(record_id)
        finally:
            if deleted:
                for record_id in deleted:
                    self.cache.remove(self.keys.detail(record_id))
                self.cache.invalidate(self.keys.lists())
        return results


class EggInventoryQueries(ResourceQueries):
    keys = egg_inventory_keys
    list_field = "inventories"
    detail_field = "inventory"
    label = "Egg inventory"

    async def list(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.cache.fetch(
            self.keys.list(page=page, limit=limit, start_date=start_date, end_date=end_date),
            lambda: self.api.list(
                page=page, limit=limit, start_date=start_date, end_date=end_date
            )
        )
