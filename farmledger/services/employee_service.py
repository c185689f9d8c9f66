"""
Employee Service
Validated CRUD for employee registrations.
"""
import logging
import uuid
from typing import Any, List, Mapping, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.exceptions import ConflictError, InternalError, NotFoundError
from farmledger.helpers import page_offset, total_pages, validate_payload
from farmledger.models import Employee
from farmledger.models.employee import utcnow
from farmledger.schemas.common import Pagination
from farmledger.schemas.employee import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)

AADHAR_CONFLICT = "Employee with this Aadhar number already exists"
NOT_FOUND = "Employee not found"


class EmployeeService:
    """Service for employee CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None
    ) -> Tuple[List[Employee], Pagination]:
        """
        Get one page of employees, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            search: Matches name (case-insensitive), phone or Aadhar number

        Returns:
            The employees on the page and the pagination metadata
        """
        query = select(Employee)
        count_query = select(func.count()).select_from(Employee)

        search = (search or "").strip()
        if search:
            condition = or_(
                Employee.full_name.icontains(search, autoescape=True),
                Employee.phone_number.contains(search, autoescape=True),
                Employee.aadhar_number.contains(search, autoescape=True),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        query = (
            query.order_by(Employee.created_at.desc(), Employee.id.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )

        total = (await self.db.execute(count_query)).scalar_one()
        result = await self.db.execute(query)
        employees = list(result.scalars().all())

        pagination = Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit)
        )
        return employees, pagination

    async def get(self, employee_id: uuid.UUID) -> Employee:
        """Get a single employee or raise NotFoundError."""
        result = await self.db.execute(
            select(Employee).where(Employee.id == employee_id)
        )
        employee = result.scalar_one_or_none()

        if not employee:
            raise NotFoundError(NOT_FOUND)

        return employee

    async def create(self, data: Mapping[str, Any]) -> Employee:
        """Validate and store a new employee."""
        payload = validate_payload(EmployeeCreate, data)

        if await self._aadhar_taken(payload.aadhar_number):
            logger.warning("Rejected duplicate Aadhar number on create")
            raise ConflictError(AADHAR_CONFLICT)

        employee = Employee(**payload.model_dump())
        self.db.add(employee)
        await self._commit()
        await self.db.refresh(employee)

        logger.info("Created employee %s", employee.id)
        return employee

    async def update(self, employee_id: uuid.UUID, data: Mapping[str, Any]) -> Employee:
        """Apply a partial update. Fields missing from ``data`` are left as they are."""
        payload = validate_payload(EmployeeUpdate, data)
        employee = await self.get(employee_id)

        changes = payload.model_dump(exclude_unset=True)

        new_aadhar = changes.get("aadhar_number")
        if new_aadhar is not None and new_aadhar != employee.aadhar_number:
            if await self._aadhar_taken(new_aadhar, exclude_id=employee.id):
                logger.warning("Rejected duplicate Aadhar number on update of %s", employee.id)
                raise ConflictError(AADHAR_CONFLICT)

        for field, value in changes.items():
            setattr(employee, field, value)
        employee.updated_at = utcnow()

        await self._commit()
        await self.db.refresh(employee)

        logger.info("Updated employee %s (%s)", employee.id, ", ".join(sorted(changes)) or "no fields")
        return employee

    async def delete(self, employee_id: uuid.UUID) -> None:
        """Permanently remove an employee."""
        employee = await self.get(employee_id)
        await self.db.delete(employee)
        await self._commit()
        logger.info("Deleted employee %s", employee_id)

    async def _aadhar_taken(
        self,
        aadhar_number: str,
        exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        query = select(Employee.id).where(Employee.aadhar_number == aadhar_number)
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def _commit(self) -> None:
        # The unique index on aadhar_number settles races the pre-check cannot
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning("Unique constraint rejected employee write: %s", exc.orig)
            raise ConflictError(AADHAR_CONFLICT) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Database write failed")
            raise InternalError(str(exc)) from exc
