import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.services import notification_service
from app.services.telegram_service import TelegramService
from app.utils.template import DEFAULT_TELEGRAM_TEMPLATE, render_template

logger = logging.getLogger(__name__)


async def get_telegram_settings(db: AsyncSession) -> schemas.TelegramSettings:
    row = await crud.crud_settings.get_settings(db)
    if row is None:
        return schemas.TelegramSettings()
    return schemas.TelegramSettings.model_validate(row)


async def save_telegram_settings(
    db: AsyncSession, *, settings_in: schemas.TelegramSettings, telegram: TelegramService
) -> schemas.TelegramSettingsSaved:
    await crud.crud_settings.save_telegram_settings(
        db,
        token=settings_in.telegram_token,
        chat=settings_in.telegram_chat,
        template=settings_in.telegram_template,
    )
    telegram.update(settings_in.telegram_token, settings_in.telegram_chat)
    return schemas.TelegramSettingsSaved(success=True)


async def load_telegram_service(db: AsyncSession) -> TelegramService:
    """Build the runtime client. Saved settings win over environment values."""
    row = await crud.crud_settings.get_settings(db)
    token = (row.telegram_token if row else "") or settings.telegram_token_value()
    chat = (row.telegram_chat if row else "") or settings.TELEGRAM_CHAT_ID
    return TelegramService(token=token, chat=chat)


async def preview_template(db: AsyncSession, *, booking_id: int) -> schemas.TemplatePreview:
    booking = await crud.crud_booking.get_booking(db, booking_id, with_labels=True)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found.")
    row = await crud.crud_settings.get_settings(db)
    template = (row.telegram_template if row else "") or DEFAULT_TELEGRAM_TEMPLATE
    data = notification_service.build_telegram_data(booking, tz_name=settings.TIMEZONE)
    return schemas.TemplatePreview(message=render_template(template, data), data=data)
