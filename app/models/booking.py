from sqlalchemy import Column, Table, Integer, String, Text, DateTime, ForeignKey, Enum as SQLAlchemyEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.db.base_class import Base
from app.models.enums import BookingStatus, ACTIVE_BOOKING_STATUSES

if TYPE_CHECKING:
    from .bay import Bay
    from .fleet import Company, Vehicle, Technician


booking_technicians = Table(
    "booking_technicians",
    Base.metadata,
    Column("booking_id", ForeignKey("bookings.id", ondelete="CASCADE"), primary_key=True),
    Column("technician_id", ForeignKey("technicians.id", ondelete="CASCADE"), primary_key=True),
)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_bay_status", "bay_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    number: Mapped[str] = mapped_column(String(16), index=True, default="")
    title: Mapped[str] = mapped_column(String, default="")
    complaint: Mapped[str] = mapped_column(Text, default="")
    description: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    fullbay_service_id: Mapped[str] = mapped_column(String, default="")

    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), nullable=False, index=True)
    bay_id: Mapped[int] = mapped_column(ForeignKey("bays.id"), nullable=False)
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("companies.id"), nullable=True, index=True)

    # Naive UTC. A missing end means the booking is open-ended.
    start: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    status: Mapped[BookingStatus] = mapped_column(
        SQLAlchemyEnum(BookingStatus, name="booking_status_enum", values_callable=lambda e: [m.value for m in e]),
        default=BookingStatus.OPEN,
        nullable=False,
    )

    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    bay: Mapped["Bay"] = relationship(back_populates="bookings")
    vehicle: Mapped["Vehicle"] = relationship()
    company: Mapped[Optional["Company"]] = relationship()
    technicians: Mapped[List["Technician"]] = relationship(secondary=booking_technicians, lazy="selectin")

    @property
    def technician_ids(self) -> List[int]:
        return [t.id for t in self.technicians]

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATUSES

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, bay_id={self.bay_id}, status={self.status})>"


class Counter(Base):
    """Named monotonically increasing sequence (booking numbers)."""
    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(String, primary_key=True)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
