"""
Egg Inventory Service
Validated CRUD for daily egg counts. Keeps total_eggs in step with the grades.
"""
import datetime as dt
import logging
import uuid
from typing import Any, List, Mapping, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.exceptions import ConflictError, InternalError, NotFoundError
from farmledger.helpers import page_offset, total_pages, validate_payload
from farmledger.models import EggInventory
from farmledger.models.employee import utcnow
from farmledger.schemas.common import Pagination
from farmledger.schemas.egg_inventory import EggInventoryCreate, EggInventoryUpdate

logger = logging.getLogger(__name__)

DATE_CONFLICT = "Inventory for this date already exists"
NOT_FOUND = "Inventory not found"
COUNT_FIELDS = ("crack_eggs", "jumbo_eggs", "normal_eggs")


def today() -> dt.date:
    return utcnow().date()


class EggInventoryService:
    """Service for egg inventory CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None
    ) -> Tuple[List[EggInventory], Pagination]:
        """
        Get one page of inventories, latest date first.

        Both date bounds are inclusive and optional.
        """
        query = select(EggInventory)
        count_query = select(func.count()).select_from(EggInventory)

        if start_date is not None:
            query = query.where(EggInventory.date >= start_date)
            count_query = count_query.where(EggInventory.date >= start_date)
        if end_date is not None:
            query = query.where(EggInventory.date <= end_date)
            count_query = count_query.where(EggInventory.date <= end_date)

        query = (
            query.order_by(EggInventory.date.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )

        total = (await self.db.execute(count_query)).scalar_one()
        result = await self.db.execute(query)
        inventories = list(result.scalars().all())

        pagination = Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit)
        )
        return inventories, pagination

    async def get(self, inventory_id: uuid.UUID) -> EggInventory:
        """Get a single inventory or raise NotFoundError."""
        result = await self.db.execute(
            select(EggInventory).where(EggInventory.id == inventory_id)
        )
        inventory = result.scalar_one_or_none()

        if not inventory:
            raise NotFoundError(NOT_FOUND)

        return inventory

    async def create(self, data: Mapping[str, Any]) -> EggInventory:
        """Validate and store a new day's counts. total_eggs is computed here."""
        payload = validate_payload(EggInventoryCreate, data)
        inventory_date = payload.date or today()

        if await self._date_taken(inventory_date):
            logger.warning("Rejected second inventory for %s", inventory_date)
            raise ConflictError(DATE_CONFLICT)

        inventory = EggInventory(
            date=inventory_date,
            crack_eggs=payload.crack_eggs,
            jumbo_eggs=payload.jumbo_eggs,
            normal_eggs=payload.normal_eggs,
        )
        inventory.recompute_total()
        self.db.add(inventory)
        await self._commit()
        await self.db.refresh(inventory)

        logger.info("Created inventory %s for %s (%d eggs)", inventory.id, inventory.date, inventory.total_eggs)
        return inventory

    async def update(self, inventory_id: uuid.UUID, data: Mapping[str, Any]) -> EggInventory:
        """
        Apply a partial update.

        When any grade count is supplied, total_eggs is recomputed from the
        merged record: new values where given, stored values otherwise.
        """
        payload = validate_payload(EggInventoryUpdate, data)
        inventory = await self.get(inventory_id)

        changes = payload.model_dump(exclude_unset=True)

        new_date = changes.get("date")
        if new_date is not None and new_date != inventory.date:
            if await self._date_taken(new_date, exclude_id=inventory.id):
                logger.warning("Rejected moving inventory %s onto %s", inventory.id, new_date)
                raise ConflictError(DATE_CONFLICT)

        for field, value in changes.items():
            setattr(inventory, field, value)
        if any(field in changes for field in COUNT_FIELDS):
            inventory.recompute_total()
        inventory.updated_at = utcnow()

        await self._commit()
        await self.db.refresh(inventory)

        logger.info("Updated inventory %s (%s)", inventory.id, ", ".join(sorted(changes)) or "no fields")
        return inventory

    async def delete(self, inventory_id: uuid.UUID) -> None:
        """Permanently remove an inventory."""
        inventory = await self.get(inventory_id)
        await self.db.delete(inventory)
        await self._commit()
        logger.info("Deleted inventory %s", inventory_id)

    async def _date_taken(
        self,
        inventory_date: dt.date,
        exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        query = select(EggInventory.id).where(EggInventory.date == inventory_date)
        if exclude_id is not None:
            query = query.where(EggInventory.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def _commit(self) -> None:
        # The unique index on date settles races the pre-check cannot
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning("Unique constraint rejected inventory write: %s", exc.orig)
            raise ConflictError(DATE_CONFLICT) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Database write failed")
            raise InternalError(str(exc)) from exc
