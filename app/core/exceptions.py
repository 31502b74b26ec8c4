"""Domain errors raised by the scheduling core.

Routers never catch these; `app.main` maps each class to an HTTP status so a
bay conflict stays distinguishable from bad input or a missing record.
"""


class BookingError(Exception):
    """Base class for scheduling errors."""

    default_message = "Booking operation failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(BookingError):
    default_message = "Invalid input."


class BookingConflictError(BookingError):
    default_message = "bay is already booked in this timeframe"


class NotFoundError(BookingError):
    default_message = "Resource not found."


class InvalidStateError(BookingError):
    default_message = "Booking is not in a state that allows this operation."
