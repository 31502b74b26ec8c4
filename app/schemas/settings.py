from pydantic import BaseModel, ConfigDict
from typing import Dict


class TelegramSettings(BaseModel):
    telegram_token: str = ""
    telegram_chat: str = ""
    telegram_template: str = ""

    model_config = ConfigDict(from_attributes=True)


class TelegramSettingsSaved(BaseModel):
    success: bool = True


class TemplatePreview(BaseModel):
    message: str
    data: Dict[str, str]
