from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from app.db.base_class import Base

GLOBAL_SETTINGS_ID = "global"


class AppSettings(Base):
    """Single-row table holding settings editable from the admin UI."""
    __tablename__ = 'app_settings'

    id = Column(String, primary_key=True, default=GLOBAL_SETTINGS_ID)
    telegram_token = Column(String, nullable=False, default="")
    telegram_chat = Column(String, nullable=False, default="")
    telegram_template = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
