from sqlalchemy import Integer, String, DateTime, ForeignKey, Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from typing import Optional, List
from datetime import datetime

from app.db.base_class import Base
from app.models.enums import VehicleType


class Company(Base):
    __tablename__ = 'companies'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, index=True, nullable=False)
    contact: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    vehicles: Mapped[List["Vehicle"]] = relationship(back_populates="company")

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name='{self.name}')>"


class Vehicle(Base):
    """A truck or trailer ("unit") brought in for service."""
    __tablename__ = 'vehicles'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("companies.id"), nullable=True)
    type: Mapped[VehicleType] = mapped_column(SQLAlchemyEnum(VehicleType, name="vehicle_type_enum"), default=VehicleType.TRUCK)
    vin: Mapped[Optional[str]] = mapped_column(String, index=True, nullable=True)
    plate: Mapped[Optional[str]] = mapped_column(String, index=True, nullable=True)
    make: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    company: Mapped[Optional["Company"]] = relationship(back_populates="vehicles")

    @property
    def label(self) -> str:
        return self.plate or self.vin or ""

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, plate='{self.plate}')>"


class Technician(Base):
    __tablename__ = 'technicians'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, index=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Technician(id={self.id}, name='{self.name}')>"
