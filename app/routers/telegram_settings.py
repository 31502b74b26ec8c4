from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas, services
from app.db.session import get_db
from app.dependencies import get_telegram, require_admin, require_scheduler
from app.services.telegram_service import TelegramService

router = APIRouter()


@router.get("/telegram", response_model=schemas.TelegramSettings)
async def get_telegram_settings(
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_admin),
):
    return await services.settings_service.get_telegram_settings(db)


@router.put("/telegram", response_model=schemas.TelegramSettingsSaved)
async def save_telegram_settings(
    settings_in: schemas.TelegramSettings,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_admin),
    telegram: TelegramService = Depends(get_telegram),
):
    """Persist the Telegram credentials and template and apply them immediately."""
    return await services.settings_service.save_telegram_settings(
        db, settings_in=settings_in, telegram=telegram
    )


@router.get("/telegram/preview", response_model=schemas.TemplatePreview)
async def preview_telegram_template(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.CurrentUser = Depends(require_scheduler),
):
    return await services.settings_service.preview_template(db, booking_id=booking_id)
