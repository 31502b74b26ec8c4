# flake8: noqa
from .common import Message
from .token import TokenPayload, CurrentUser
from .bay import Bay, BayCreate, BayUpdate
from .booking import (
    Booking, BookingBase, BookingCreate, BookingUpdate, BayOccupancy, OccupancyResponse
)
from .audit_log import AuditLog
from .settings import TelegramSettings, TelegramSettingsSaved, TemplatePreview
from .dashboard import DashboardSummary, TopEntry, TopLists
