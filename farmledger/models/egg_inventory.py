"""
Egg Inventory Model
Stores one egg count per calendar day.
"""
from sqlalchemy import Integer, Date, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import datetime as dt
import uuid

from farmledger.database import Base
from farmledger.models.employee import utcnow


class EggInventory(Base):
    """Daily egg counts by grade."""

    __tablename__ = "egg_inventories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    date: Mapped[dt.date] = mapped_column(
        Date,
        unique=True,
        nullable=False,
        index=True
    )
    crack_eggs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    jumbo_eggs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    normal_eggs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Always crack + jumbo + normal, maintained by the service
    total_eggs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    def recompute_total(self) -> int:
        """Refresh total_eggs from the three grade counts."""
        self.total_eggs = self.crack_eggs + self.jumbo_eggs + self.normal_eggs
        return self.total_eggs

    def __repr__(self) -> str:
        return f"<EggInventory(date={self.date}, total_eggs={self.total_eggs})>"
