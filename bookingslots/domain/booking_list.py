"""
Grouping of bookings into the upcoming, past and cancelled lists.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .models import Booking

logger = logging.getLogger(__name__)


class BookingTab(str, Enum):
    """Booking list views."""
    UPCOMING = "upcoming"
    PAST = "past"
    CANCELLED = "cancelled"


def bookings_for_tab(
    bookings: Iterable[Booking],
    tab: BookingTab | str,
    now: DateTime,
    timezone: str = "UTC"
) -> List[Booking]:
    """
    Select the bookings shown under a tab.

    Upcoming and past only hold active bookings with a readable start time:
    upcoming starts after the current minute (soonest first), past starts
    before it (most recent first). Cancelled keeps the input order.
    """
    tab = BookingTab(tab)

    if tab is BookingTab.CANCELLED:
        return [booking for booking in bookings if booking.is_cancelled]

    current_minute = now.start_of("minute")
    dated: List[Tuple[DateTime, Booking]] = []

    for booking in bookings:
        if booking.is_cancelled:
            continue
        start = _start_of(booking, timezone)
        if start is None:
            continue
        if tab is BookingTab.UPCOMING and start > current_minute:
            dated.append((start, booking))
        elif tab is BookingTab.PAST and start < current_minute:
            dated.append((start, booking))

    dated.sort(key=lambda pair: pair[0], reverse=tab is BookingTab.PAST)
    return [booking for _, booking in dated]


def _start_of(booking: Booking, timezone: str) -> Optional[DateTime]:
    if not booking.start_time:
        return None
    try:
        parsed = pendulum.parse(booking.start_time, tz=timezone)
    except ValueError:
        logger.debug("Booking %s has an unreadable start time: %s", booking.id, booking.start_time)
        return None
    return parsed if isinstance(parsed, DateTime) else None
