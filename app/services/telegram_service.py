import logging
from typing import Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramDeliveryError(Exception):
    """Telegram rejected the message or could not be reached."""


class TelegramService:
    """Sends plain chat messages through the Bot API `sendMessage` method."""

    def __init__(self, token: Optional[str] = None, chat: Optional[str] = None, timeout: Optional[float] = None):
        self.token = token or ""
        self.chat = chat or ""
        self.timeout = timeout if timeout is not None else settings.TELEGRAM_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.chat)

    def update(self, token: Optional[str], chat: Optional[str]) -> None:
        self.token = token or ""
        self.chat = chat or ""
        logger.info(f"Telegram credentials updated (enabled={self.enabled})")

    async def notify(self, text: str) -> bool:
        """Deliver `text`. Returns False without a request when credentials are missing."""
        if not self.enabled:
            logger.debug("Telegram not configured, skipping message")
            return False

        url = f"{TELEGRAM_API_URL}/bot{self.token}/sendMessage"
        payload = {"chat_id": self.chat, "text": text, "parse_mode": "HTML"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise TelegramDeliveryError(f"Telegram request timed out: {e}") from e
        except httpx.RequestError as e:
            raise TelegramDeliveryError(f"Telegram network error: {e}") from e

        if response.status_code >= 300:
            raise TelegramDeliveryError(
                f"Telegram send failed: {response.status_code} - {response.text[:200]}"
            )
        return True
