from . import booking_validation
from . import booking_lifecycle
from . import telegram_service
from . import notification_service
from . import realtime
from . import effects
from . import booking_service
from . import schedule_service
from . import export_service
from . import bay_service
from . import audit_service
from . import dashboard_service
from . import settings_service

__all__ = [
    "booking_validation",
    "booking_lifecycle",
    "telegram_service",
    "notification_service",
    "realtime",
    "effects",
    "booking_service",
    "schedule_service",
    "export_service",
    "bay_service",
    "audit_service",
    "dashboard_service",
    "settings_service",
]
