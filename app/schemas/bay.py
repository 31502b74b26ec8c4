from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

from app.utils.datetime_utils import as_utc


class BayBase(BaseModel):
    name: str


class BayCreate(BayBase):
    key: Optional[str] = None  # Defaults to the name


class BayUpdate(BaseModel):
    name: Optional[str] = None
    key: Optional[str] = None


class Bay(BayBase):
    id: int
    key: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def mark_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)
