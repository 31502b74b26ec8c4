import csv
import io
import time
from typing import Iterable, List

from app.models.booking import Booking
from app.utils.datetime_utils import format_pretty

CSV_COLUMNS = [
    "number", "complaint", "description", "unit", "bay", "company", "technicians",
    "start", "end", "status",
]


def booking_row(booking: Booking, *, tz_name: str) -> List[str]:
    """One export row. Expects vehicle, bay and company loaded; ids stand in for missing labels."""
    unit = booking.vehicle.label if booking.vehicle is not None else ""
    bay = booking.bay.name if booking.bay is not None else ""
    company = ""
    if booking.company_id is not None:
        company = (booking.company.name if booking.company is not None else "") or str(booking.company_id)
    return [
        booking.number or "",
        booking.complaint or "",
        booking.description or "",
        unit or str(booking.vehicle_id),
        bay or str(booking.bay_id),
        company,
        ", ".join(t.name for t in booking.technicians if t.name),
        format_pretty(booking.start, tz_name),
        format_pretty(booking.end, tz_name),
        booking.status.value,
    ]


def bookings_to_csv(bookings: Iterable[Booking], *, tz_name: str) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for booking in bookings:
        writer.writerow(booking_row(booking, tz_name=tz_name))
    return buffer.getvalue()


def export_filename() -> str:
    return f"bookings-{int(time.time())}.csv"
