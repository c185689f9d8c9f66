"""
Employee Schemas
Pydantic models for employee data validation.
"""
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Optional
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID
import re

from farmledger.models.employee import Gender, MaritalStatus
from farmledger.schemas.common import Pagination, reject_bool, reject_null


PHONE_RE = re.compile(r"[0-9]{10}")
AADHAR_RE = re.compile(r"[0-9]{12}")
SALARY_CAP = Decimal("10000000000")  # NUMERIC(12, 2)


def check_phone_number(value: str) -> str:
    if not PHONE_RE.fullmatch(value):
        raise ValueError("Phone number must be 10 digits")
    return value


def check_aadhar_number(value: str) -> str:
    if not AADHAR_RE.fullmatch(value):
        raise ValueError("Aadhar number must be 12 digits")
    return value


def round_salary(value: Decimal) -> Decimal:
    rounded = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if rounded <= 0:
        raise ValueError("Salary must be greater than 0")
    if rounded >= SALARY_CAP:
        raise ValueError("Salary is too large")
    return rounded


FullName = Annotated[str, Field(min_length=1, max_length=100)]
Age = Annotated[int, Field(ge=18, le=100, strict=True)]
PhoneNumber = Annotated[str, AfterValidator(check_phone_number)]
AadharNumber = Annotated[str, AfterValidator(check_aadhar_number)]
Salary = Annotated[Decimal, BeforeValidator(reject_bool), Field(gt=0), AfterValidator(round_salary)]
JobDescription = Annotated[str, Field(min_length=10, max_length=1000)]


class EmployeeCreate(BaseModel):
    """Schema for creating an employee. Every field is required."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: FullName
    age: Age
    gender: Gender
    marital_status: MaritalStatus
    phone_number: PhoneNumber
    aadhar_number: AadharNumber
    salary: Salary
    work_employed_to_do: JobDescription


class EmployeeUpdate(BaseModel):
    """Schema for updating employee data. Only supplied fields are checked."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: Optional[FullName] = None
    age: Optional[Age] = None
    gender: Optional[Gender] = None
    marital_status: Optional[MaritalStatus] = None
    phone_number: Optional[PhoneNumber] = None
    aadhar_number: Optional[AadharNumber] = None
    salary: Optional[Salary] = None
    work_employed_to_do: Optional[JobDescription] = None

    @field_validator("*", mode="before")
    @classmethod
    def no_nulls(cls, value):
        return reject_null(value)


class EmployeeResponse(BaseModel):
    """Schema for employee response."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    id: UUID
    full_name: str
    age: int
    gender: Gender
    marital_status: MaritalStatus
    phone_number: str
    aadhar_number: str
    salary: Decimal
    work_employed_to_do: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("salary")
    def serialize_salary(self, salary: Decimal) -> float:
        return float(salary)


class EmployeeEnvelope(BaseModel):
    employee: EmployeeResponse


class EmployeeMutationResponse(BaseModel):
    message: str
    employee: EmployeeResponse


class EmployeeListResponse(BaseModel):
    """Schema for one page of employees."""
    employees: List[EmployeeResponse]
    pagination: Pagination
