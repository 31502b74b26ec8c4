import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import BackgroundTasks

from app.services.notification_service import deliver
from app.services.realtime import RealtimeBroadcaster
from app.services.telegram_service import TelegramService

logger = logging.getLogger(__name__)


@dataclass
class BookingEffects:
    """Best-effort side effects of a committed booking mutation."""

    broadcaster: Optional[RealtimeBroadcaster] = None
    telegram: Optional[TelegramService] = None
    background_tasks: Optional[BackgroundTasks] = None

    def publish(self, event_type: str, data: Any) -> None:
        if self.broadcaster is None:
            return
        try:
            self.broadcaster.publish(event_type, data)
        except Exception as e:
            logger.error(f"Could not publish '{event_type}': {e}", exc_info=True)

    def notify(self, message: Optional[str]) -> None:
        if not message or self.telegram is None or self.background_tasks is None:
            return
        self.background_tasks.add_task(deliver, self.telegram, message)
