"""
Validation Helpers
Run a pydantic schema over raw input and report field-level errors.
"""
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar
import datetime as dt
import uuid

from pydantic import BaseModel, ValidationError

from farmledger.exceptions import RecordValidationError
from farmledger.schemas.common import parse_calendar_date


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def format_errors(errors: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Reduce pydantic/FastAPI error dicts to ``{"path": [...], "message": ...}``.

    The ``body``/``query`` prefix FastAPI adds to request errors is kept so the
    caller can tell a bad query parameter from a bad body field.
    """
    return [
        {"path": [str(part) for part in error.get("loc", ())], "message": error.get("msg", "")}
        for error in errors
    ]


def validate_payload(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Validate ``data`` against ``schema``.

    Args:
        schema: Pydantic model describing the input (full or partial variant)
        data: Plain mapping, typically a decoded JSON body or a form

    Returns:
        The validated, normalized model instance

    Raises:
        RecordValidationError: with one detail entry per failing field
    """
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise RecordValidationError(format_errors(exc.errors())) from exc


def parse_uuid(value: str, field_name: str = "ID") -> uuid.UUID:
    """Parse string to UUID, reporting a malformed value as a validation error."""
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise RecordValidationError(
            [{"path": ["query", "id"], "message": f"Invalid {field_name} format"}],
            message=f"Invalid {field_name} format: '{value}'"
        )


def parse_date_param(value: Optional[str], name: str) -> Optional[dt.date]:
    """Parse an optional date query parameter. Blank means not supplied."""
    if value is None or not value.strip():
        return None
    try:
        return parse_calendar_date(value)
    except ValueError as exc:
        raise RecordValidationError(
            [{"path": ["query", name], "message": str(exc)}],
        )
