from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.exceptions import InvalidInputError
from app.models.audit_log import AuditLog

DEFAULT_LOG_LIMIT = 500
MAX_LOG_LIMIT = 1000


async def list_logs(
    db: AsyncSession,
    *,
    user_id: Optional[int] = None,
    entity: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = DEFAULT_LOG_LIMIT,
) -> List[AuditLog]:
    if limit < 1 or limit > MAX_LOG_LIMIT:
        raise InvalidInputError(f"limit must be between 1 and {MAX_LOG_LIMIT}")
    return await crud.crud_audit_log.get_entries(
        db, user_id=user_id, entity=entity, action=action, limit=limit
    )
