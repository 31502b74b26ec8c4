from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Any, Dict, List, Optional
import logging

from app.models.audit_log import AuditLog
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


def add_entry(
    db: AsyncSession,
    *,
    action: str,
    entity: str,
    entity_id: int,
    user_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction. Committed with the mutation it describes."""
    entry = AuditLog(
        action=action,
        entity=entity,
        entity_id=entity_id,
        user_id=user_id,
        meta=meta or {},
        created_at=utcnow(),
    )
    db.add(entry)
    return entry


async def get_entries(
    db: AsyncSession,
    *,
    user_id: Optional[int] = None,
    entity: Optional[str] = None,
    entity_id: Optional[int] = None,
    action: Optional[str] = None,
    limit: int = 500,
) -> List[AuditLog]:
    query = select(AuditLog)
    if user_id is not None:
        query = query.filter(AuditLog.user_id == user_id)
    if entity:
        query = query.filter(AuditLog.entity == entity)
    if entity_id is not None:
        query = query.filter(AuditLog.entity_id == entity_id)
    if action:
        query = query.filter(AuditLog.action == action)
    query = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()
