"""Telegram messages for booking events.

Messages are composed while the request still holds a database session and
are delivered afterwards from a background task, so a slow or failing
Telegram API never affects the booking mutation.
"""
import html
import logging
from datetime import datetime
from typing import Dict, Optional

from app.models.booking import Booking
from app.services.telegram_service import TelegramService
from app.utils.datetime_utils import format_iso, format_pretty
from app.utils.template import render_template

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
RESCHEDULED = "rescheduled"
CANCELED = "canceled"
CLOSED = "closed"

HEADINGS = {
    CREATED: ("🆕", "New booking"),
    UPDATED: ("✏️", "Booking updated"),
    RESCHEDULED: ("📅", "Booking rescheduled"),
    CANCELED: ("🚫", "Booking canceled"),
    CLOSED: ("✅", "Booking ready"),
}
DEFAULT_HEADING = ("ℹ️", "Booking")


def public_number(booking: Booking) -> str:
    return booking.number or str(booking.id)


def build_telegram_data(booking: Booking, *, tz_name: str) -> Dict[str, str]:
    """Flat placeholder mapping for templates.

    Expects `bay`, `vehicle` and `company` to be loaded on the booking. Values
    are HTML-escaped since messages go out with the HTML parse mode.
    """
    data = {
        "booking_id": public_number(booking),
        "number": booking.number or "",
        "title": booking.title or "",
        "complaint": booking.complaint or "",
        "description": booking.description or "",
        "status": booking.status.value,
        "start": format_pretty(booking.start, tz_name),
        "start_iso": format_iso(booking.start, tz_name),
        "end": format_pretty(booking.end, tz_name),
        "end_iso": format_iso(booking.end, tz_name),
    }
    data["start_pretty"] = data["start"]
    if booking.end is not None:
        data["end_pretty"] = data["end"]

    vehicle = booking.vehicle
    if vehicle is not None:
        for prefix in ("unit", "vehicle"):
            data[f"{prefix}_plate"] = vehicle.plate or ""
            data[f"{prefix}_vin"] = vehicle.vin or ""
            data[f"{prefix}_make"] = vehicle.make or ""
            data[f"{prefix}_model"] = vehicle.model or ""
        data["unit"] = vehicle.label
    if booking.bay is not None:
        data["bay_name"] = booking.bay.name
    if booking.company is not None:
        data["company_name"] = booking.company.name
    if booking.fullbay_service_id:
        data["fullbay_service_id"] = booking.fullbay_service_id
    if booking.technicians:
        data["technician_names"] = ", ".join(t.name for t in booking.technicians)
    return {key: html.escape(value, quote=False) for key, value in data.items()}


def render_fallback(kind: str, booking: Booking, data: Dict[str, str], *, tz_name: str) -> str:
    icon, title = HEADINGS.get(kind, DEFAULT_HEADING)
    unit = data.get("unit") or data.get("vehicle_plate") or data.get("vehicle_vin") or ""
    plate, vin = data.get("unit_plate", ""), data.get("unit_vin", "")

    lines = [f"{icon} <b>{title}</b> • <b>#{public_number(booking)}</b>", ""]
    if data.get("complaint"):
        lines.append(f"<b>Complaint:</b> {data['complaint']}")
    if data.get("description"):
        lines.append(f"<b>Description:</b> {data['description']}")
    lines.append("")
    if unit or plate or vin:
        unit_line = f"<b>Unit:</b> {unit}"
        if plate or vin:
            unit_line += f"  ({plate} {vin})"
        lines.append(unit_line)
    if data.get("bay_name"):
        lines.append(f"<b>Bay:</b> {data['bay_name']}")
    if data.get("company_name"):
        lines.append(f"<b>Company:</b> {data['company_name']}")
    if data.get("fullbay_service_id"):
        lines.append(f"<b>Fullbay Service ID:</b> {data['fullbay_service_id']}")
    lines.append("")
    if data.get("technician_names"):
        lines.append(f"<b>Technicians:</b> {data['technician_names']}")
        lines.append("")
    lines.append(f"<b>Start:</b> {format_pretty(booking.start, tz_name)}")
    if booking.end is not None:
        lines.append(f"<b>End:</b> {format_pretty(booking.end, tz_name)}")
    return "\n".join(lines) + "\n"


def times_changed(
    old_start: datetime, old_end: Optional[datetime], new_start: datetime, new_end: Optional[datetime]
) -> bool:
    return old_start != new_start or old_end != new_end


def compose_message(
    kind: str, booking: Booking, *, template: Optional[str], tz_name: str
) -> Optional[str]:
    """Pick the text to send for a booking event, or None when nothing should go out.

    Creation uses the template when it renders to something, else the fallback.
    Updates are template-only. Cancel and close always use the fallback.
    """
    data = build_telegram_data(booking, tz_name=tz_name)
    if kind in (UPDATED, RESCHEDULED):
        if not template:
            return None
        data["status_icon"], data["status_name"] = HEADINGS[kind]
        return render_template(template, data)
    if kind == CREATED and template:
        data["status_icon"], data["status_name"] = HEADINGS[CREATED]
        message = render_template(template, data)
        if message.strip():
            return message
    return render_fallback(kind, booking, data, tz_name=tz_name)


async def deliver(telegram: TelegramService, message: Optional[str]) -> None:
    """Background task body. Failures are logged and dropped."""
    if not message:
        return
    try:
        await telegram.notify(message)
    except Exception as e:
        logger.warning(f"Telegram notification failed: {e}")
