from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas, services
from app.db.session import get_db
from app.dependencies import get_current_user

router = APIRouter()


@router.get("/summary", response_model=schemas.DashboardSummary)
async def get_summary(
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    return await services.dashboard_service.get_summary(db)
