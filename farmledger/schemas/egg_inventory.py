"""
Egg Inventory Schemas
Pydantic models for daily egg counts. total_eggs is output-only.
"""
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from typing import Annotated, List, Optional
import datetime as dt
from uuid import UUID

from farmledger.schemas.common import Pagination, parse_calendar_date, reject_null


CalendarDate = Annotated[dt.date, BeforeValidator(parse_calendar_date)]
# Strict: JSON booleans and numeric strings are not counts
EggCount = Annotated[int, Field(ge=0, strict=True)]


class EggInventoryCreate(BaseModel):
    """Schema for creating an inventory. Date defaults to today."""
    date: Optional[CalendarDate] = None
    crack_eggs: EggCount
    jumbo_eggs: EggCount
    normal_eggs: EggCount


class EggInventoryUpdate(BaseModel):
    """Schema for updating an inventory."""
    date: Optional[CalendarDate] = None
    crack_eggs: Optional[EggCount] = None
    jumbo_eggs: Optional[EggCount] = None
    normal_eggs: Optional[EggCount] = None

    @field_validator("*", mode="before")
    @classmethod
    def no_nulls(cls, value):
        return reject_null(value)


class EggInventoryResponse(BaseModel):
    """Schema for inventory response."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    date: dt.date
    crack_eggs: int
    jumbo_eggs: int
    normal_eggs: int
    total_eggs: int
    created_at: dt.datetime
    updated_at: dt.datetime


class EggInventoryEnvelope(BaseModel):
    inventory: EggInventoryResponse


class EggInventoryMutationResponse(BaseModel):
    message: str
    inventory: EggInventoryResponse


class EggInventoryListResponse(BaseModel):
    """Schema for one page of inventories."""
    inventories: List[EggInventoryResponse]
    pagination: Pagination
