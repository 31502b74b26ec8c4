from __future__ import annotations
import enum
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    DISPATCHER = "dispatcher"
    MECHANIC = "mechanic"
    CLIENT = "client"


class BookingStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"
    CANCELED = "canceled"


# Statuses that reserve a bay. Closed and canceled bookings are history only.
ACTIVE_BOOKING_STATUSES = (BookingStatus.OPEN, BookingStatus.IN_PROGRESS)
TERMINAL_BOOKING_STATUSES = (BookingStatus.CLOSED, BookingStatus.CANCELED)


class VehicleType(str, enum.Enum):
    TRUCK = "truck"
    TRAILER = "trailer"


class BookingEvent(str, enum.Enum):
    """Event names shared by the realtime channel and the audit log."""
    CREATED = "booking.created"
    UPDATED = "booking.updated"
    CANCELED = "booking.canceled"
    CLOSED = "booking.closed"
    DELETED = "booking.deleted"
    ASSIGNED = "booking.assigned"
