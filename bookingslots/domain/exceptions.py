"""
Domain-specific exception hierarchy for the booking slots application.
"""


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class BookingAPIError(SchedulingError):
    """Raised when scheduling data cannot be fetched or parsed."""


class NotFoundError(BookingAPIError):
    """Raised when the API reports that a requested record does not exist."""
