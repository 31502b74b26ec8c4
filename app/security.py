from datetime import datetime, timedelta, timezone
import logging

from jose import JWTError, jwt

from app.core.config import settings
from app.models.enums import UserRole

logger = logging.getLogger(__name__)


# --- Token Creation ---
def create_access_token(
    *, user_id: int, role: UserRole, subject: str | None = None, expires_delta: timedelta | None = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": subject or str(user_id),
        "user_id": user_id,
        "role": role.value,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decodes the access token and returns the payload."""
    try:
        return jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWTError during token decoding: {e}")
        raise
