from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional, List

from app.models.enums import BookingStatus
from app.utils.datetime_utils import to_utc_naive, as_utc


class BookingBase(BaseModel):
    vehicle_id: int
    bay_id: int
    technician_ids: List[int] = Field(default_factory=list)
    company_id: Optional[int] = None
    start: datetime
    end: Optional[datetime] = None
    status: Optional[BookingStatus] = None
    title: str = ""
    complaint: str = ""
    description: str = ""
    notes: str = ""
    fullbay_service_id: str = ""

    @field_validator("start", "end")
    @classmethod
    def normalise_instant(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc_naive(value) if value is not None else None

    @field_validator("technician_ids")
    @classmethod
    def dedupe_technicians(cls, value: List[int]) -> List[int]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end is not None and self.end < self.start:
            raise ValueError("end must not precede start")
        return self


class BookingCreate(BookingBase):
    pass


class BookingUpdate(BookingBase):
    """Full replacement of the editable fields (PUT semantics)."""
    pass


class Booking(BaseModel):
    id: int
    number: str
    title: str
    complaint: str
    description: str
    notes: str
    fullbay_service_id: str
    vehicle_id: int
    bay_id: int
    company_id: Optional[int] = None
    technician_ids: List[int] = []
    start: datetime
    end: Optional[datetime] = None
    status: BookingStatus
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start", "end", "created_at", "updated_at")
    @classmethod
    def mark_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class BayOccupancy(BaseModel):
    bay_id: int
    bay_key: str
    bay_name: str
    booking: Optional[Booking] = None


class OccupancyResponse(BaseModel):
    at: datetime
    bays: List[BayOccupancy]

    @field_validator("at")
    @classmethod
    def mark_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
