from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app import schemas, services
from app.db.session import get_db
from app.dependencies import require_admin

router = APIRouter()


@router.get("", response_model=List[schemas.AuditLog])
async def list_logs(
    user_id: Optional[int] = None,
    entity: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = services.audit_service.DEFAULT_LOG_LIMIT,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_admin),
):
    """Audit trail, newest first."""
    return await services.audit_service.list_logs(
        db, user_id=user_id, entity=entity, action=action, limit=limit
    )
