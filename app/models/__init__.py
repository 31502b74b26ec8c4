# Import the Base class to make it accessible for models
# and for Alembic discovery via Base.metadata
from app.db.base_class import Base  # noqa: F401

# Explicit imports so relationship() strings resolve before the app loads.
from .bay import Bay
from .fleet import Company, Vehicle, Technician
from .booking import Booking, Counter, booking_technicians
from .audit_log import AuditLog
from .app_settings import AppSettings, GLOBAL_SETTINGS_ID
from .enums import (
    UserRole, BookingStatus, VehicleType, BookingEvent,
    ACTIVE_BOOKING_STATUSES, TERMINAL_BOOKING_STATUSES,
)

__all__ = [
    "Base",
    "Bay",
    "Company",
    "Vehicle",
    "Technician",
    "Booking",
    "Counter",
    "booking_technicians",
    "AuditLog",
    "AppSettings",
    "GLOBAL_SETTINGS_ID",
    "UserRole",
    "BookingStatus",
    "VehicleType",
    "BookingEvent",
    "ACTIVE_BOOKING_STATUSES",
    "TERMINAL_BOOKING_STATUSES",
]
