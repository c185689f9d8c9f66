"""
Egg Inventory Router
JSON resource for daily egg counts at /api/egg-inventory.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.config import settings
from farmledger.database import get_db
from farmledger.exceptions import RecordValidationError
from farmledger.helpers import parse_date_param, parse_uuid
from farmledger.schemas.common import MessageResponse
from farmledger.schemas.egg_inventory import (
    EggInventoryEnvelope,
    EggInventoryListResponse,
    EggInventoryMutationResponse,
    EggInventoryResponse
)
from farmledger.services import EggInventoryService


router = APIRouter()


def get_egg_inventory_service(db: AsyncSession = Depends(get_db)) -> EggInventoryService:
    return EggInventoryService(db)


def require_id(id: Optional[str]) -> str:
    if not id:
        raise RecordValidationError(
            [{"path": ["query", "id"], "message": "Field required"}],
            message="Inventory ID is required"
        )
    return id


@router.get("")
async def read_inventories(
    id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    service: EggInventoryService = Depends(get_egg_inventory_service)
) -> Dict[str, Any]:
    """Get a single inventory by ID, or a page of inventories within a date range."""
    if id:
        inventory = await service.get(parse_uuid(id, "inventory ID"))
        return EggInventoryEnvelope(
            inventory=EggInventoryResponse.model_validate(inventory)
        ).model_dump(mode="json")

    inventories, pagination = await service.list(
        page=page,
        limit=limit,
        start_date=parse_date_param(start_date, "startDate"),
        end_date=parse_date_param(end_date, "endDate")
    )
    return EggInventoryListResponse(
        inventories=[EggInventoryResponse.model_validate(i) for i in inventories],
        pagination=pagination
    ).model_dump(mode="json", by_alias=True)


@router.post("", response_model=EggInventoryMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory(
    payload: Dict[str, Any] = Body(...),
    service: EggInventoryService = Depends(get_egg_inventory_service)
):
    """Record a day's egg counts."""
    inventory = await service.create(payload)
    return {"message": "Inventory created successfully", "inventory": inventory}


@router.put("", response_model=EggInventoryMutationResponse)
async def update_inventory(
    id: Optional[str] = Query(None),
    payload: Dict[str, Any] = Body(...),
    service: EggInventoryService = Depends(get_egg_inventory_service)
):
    """Update the supplied fields of an inventory."""
    inventory_id = parse_uuid(require_id(id), "inventory ID")
    inventory = await service.update(inventory_id, payload)
    return {"message": "Inventory updated successfully", "inventory": inventory}


@router.delete("", response_model=MessageResponse)
async def delete_inventory(
    id: Optional[str] = Query(None),
    service: EggInventoryService = Depends(get_egg_inventory_service)
):
    """Delete an inventory."""
    inventory_id = parse_uuid(require_id(id), "inventory ID")
    await service.delete(inventory_id)
    return {"message": "Inventory deleted successfully"}
