from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from app.models.app_settings import AppSettings, GLOBAL_SETTINGS_ID
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


async def get_settings(db: AsyncSession) -> Optional[AppSettings]:
    return await db.get(AppSettings, GLOBAL_SETTINGS_ID)


async def save_telegram_settings(
    db: AsyncSession, *, token: str, chat: str, template: str
) -> AppSettings:
    row = await get_settings(db)
    if row is None:
        row = AppSettings(id=GLOBAL_SETTINGS_ID)
        db.add(row)
    row.telegram_token = token
    row.telegram_chat = chat
    row.telegram_template = template
    row.updated_at = utcnow()
    await db.commit()
    await db.refresh(row)
    logger.info("Telegram settings saved")
    return row
