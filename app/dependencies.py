from fastapi import BackgroundTasks, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from typing import List
from jose import JWTError
from pydantic import ValidationError

from app import schemas, security
from app.core.config import settings
from app.models.enums import UserRole
from app.services.effects import BookingEffects
from app.services.telegram_service import TelegramService


oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


def current_user_from_token(token: str) -> schemas.CurrentUser:
    """Validate a bearer token and return its identity. Raises JWTError or ValidationError."""
    payload = security.decode_access_token(token)
    token_data = schemas.TokenPayload(**payload)
    if token_data.user_id is None or token_data.role is None:
        raise JWTError("Token is missing user_id or role")
    return schemas.CurrentUser(id=token_data.user_id, role=token_data.role)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> schemas.CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        return current_user_from_token(token)
    except (JWTError, ValidationError):
        raise credentials_exception


def get_current_user_with_roles(required_roles: List[UserRole]):
    async def role_checker(current_user: schemas.CurrentUser = Depends(get_current_user)):
        if current_user.role not in required_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"The user doesn't have the required privileges. Requires one of: {', '.join(role.value for role in required_roles)}",
            )
        return current_user
    return role_checker


require_admin = get_current_user_with_roles([UserRole.ADMIN])
require_scheduler = get_current_user_with_roles([UserRole.ADMIN, UserRole.DISPATCHER])
require_closer = get_current_user_with_roles([UserRole.ADMIN, UserRole.DISPATCHER, UserRole.MECHANIC])


def get_telegram(request: Request) -> TelegramService:
    return request.app.state.telegram


def get_booking_effects(request: Request, background_tasks: BackgroundTasks) -> BookingEffects:
    return BookingEffects(
        broadcaster=getattr(request.app.state, "broadcaster", None),
        telegram=getattr(request.app.state, "telegram", None),
        background_tasks=background_tasks,
    )
