from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Any, Dict, Optional

from app.utils.datetime_utils import as_utc


class AuditLog(BaseModel):
    id: int
    action: str
    entity: str
    entity_id: int
    user_id: Optional[int] = None
    meta: Dict[str, Any] = {}
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def mark_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
