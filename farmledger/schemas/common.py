"""
Common Schemas
Pieces shared by the employee and egg inventory schemas.
"""
from typing import Any, List
import datetime as dt

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def reject_null(value: Any) -> Any:
    """Supplied fields of a partial update may be omitted but never null."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def reject_bool(value: Any) -> Any:
    """JSON true/false must not pass as 1/0."""
    if isinstance(value, bool):
        raise ValueError("Input should be a valid number")
    return value


def parse_calendar_date(value: Any) -> Any:
    """
    Accept ``YYYY-MM-DD`` or a full ISO-8601 timestamp and keep the calendar date.

    Anything that is not a string or datetime is passed through for pydantic
    to judge.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError("Invalid date format")
    return value


class Pagination(BaseModel):
    """Metadata for one page of a list result."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int


class ErrorDetail(BaseModel):
    """One failing field."""
    path: List[str]
    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""
    error: str
    details: List[ErrorDetail] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """Body of a successful delete."""
    message: str
