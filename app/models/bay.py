from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from typing import List, TYPE_CHECKING
from datetime import datetime

from app.db.base_class import Base

if TYPE_CHECKING:
    from .booking import Booking


class Bay(Base):
    __tablename__ = 'bays'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    bookings: Mapped[List["Booking"]] = relationship(back_populates="bay")

    def __repr__(self) -> str:
        return f"<Bay(id={self.id}, key='{self.key}')>"
