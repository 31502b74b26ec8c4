from pydantic import BaseModel
from typing import Optional

from app.models.enums import UserRole


class TokenPayload(BaseModel):
    sub: Optional[str] = None # 'sub' is the standard JWT field for subject (usually user identifier)
    user_id: Optional[int] = None
    role: Optional[UserRole] = None


class CurrentUser(BaseModel):
    """Identity carried by a validated access token. Users live outside this service."""
    id: int
    role: UserRole
