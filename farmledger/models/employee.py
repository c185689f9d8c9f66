"""
Employee Model
Stores employee registrations.
"""
from sqlalchemy import String, Integer, Numeric, Text, DateTime, Enum, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
import enum
import uuid

from farmledger.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class MaritalStatus(str, enum.Enum):
    BACHELOR = "BACHELOR"
    MARRIED = "MARRIED"
    HAS_FAMILY = "HAS_FAMILY"


class Employee(Base):
    """A registered employee."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[Gender] = mapped_column(
        Enum(Gender, native_enum=False, length=20),
        nullable=False
    )
    marital_status: Mapped[MaritalStatus] = mapped_column(
        Enum(MaritalStatus, native_enum=False, length=20),
        nullable=False
    )
    phone_number: Mapped[str] = mapped_column(String(10), nullable=False)
    aadhar_number: Mapped[str] = mapped_column(
        String(12),
        unique=True,
        nullable=False,
        index=True
    )
    salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    work_employed_to_do: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    @property
    def formatted_salary(self) -> str:
        """Format salary as Indian rupees with lakh/crore grouping."""
        if self.salary is None:
            return "N/A"
        rupees = str(int(self.salary.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))
        head, tail = rupees[:-3], rupees[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        return "₹" + ",".join(groups + [tail])

    def __repr__(self) -> str:
        return f"<Employee(full_name={self.full_name}, aadhar_number={self.aadhar_number})>"
