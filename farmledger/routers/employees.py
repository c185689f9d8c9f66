"""
Employees Router
JSON resource for employee CRUD at /api/employee.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.config import settings
from farmledger.database import get_db
from farmledger.exceptions import RecordValidationError
from farmledger.helpers import parse_uuid
from farmledger.schemas.common import MessageResponse
from farmledger.schemas.employee import (
    EmployeeEnvelope,
    EmployeeListResponse,
    EmployeeMutationResponse,
    EmployeeResponse
)
from farmledger.services import EmployeeService


router = APIRouter()


def get_employee_service(db: AsyncSession = Depends(get_db)) -> EmployeeService:
    return EmployeeService(db)


def require_id(id: Optional[str]) -> str:
    if not id:
        raise RecordValidationError(
            [{"path": ["query", "id"], "message": "Field required"}],
            message="Employee ID is required"
        )
    return id


@router.get("")
async def read_employees(
    id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: Optional[str] = Query(None),
    service: EmployeeService = Depends(get_employee_service)
) -> Dict[str, Any]:
    """Get a single employee by ID, or a page of employees."""
    if id:
        employee = await service.get(parse_uuid(id, "employee ID"))
        return EmployeeEnvelope(
            employee=EmployeeResponse.model_validate(employee)
        ).model_dump(mode="json", by_alias=True)

    employees, pagination = await service.list(page=page, limit=limit, search=search)
    return EmployeeListResponse(
        employees=[EmployeeResponse.model_validate(e) for e in employees],
        pagination=pagination
    ).model_dump(mode="json", by_alias=True)


@router.post("", response_model=EmployeeMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: Dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service)
):
    """Create an employee."""
    employee = await service.create(payload)
    return {"message": "Employee created successfully", "employee": employee}


@router.put("", response_model=EmployeeMutationResponse)
async def update_employee(
    id: Optional[str] = Query(None),
    payload: Dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service)
):
    """Update the supplied fields of an employee."""
    employee_id = parse_uuid(require_id(id), "employee ID")
    employee = await service.update(employee_id, payload)
    return {"message": "Employee updated successfully", "employee": employee}


@router.delete("", response_model=MessageResponse)
async def delete_employee(
    id: Optional[str] = Query(None),
    service: EmployeeService = Depends(get_employee_service)
):
    """Delete an employee."""
    employee_id = parse_uuid(require_id(id), "employee ID")
    await service.delete(employee_id)
    return {"message": "Employee deleted successfully"}
