"""
Host-side management: editing weekly availability and handling bookings.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Sequence, Tuple

import pendulum
from pendulum import DateTime

from ..domain.booking_list import BookingTab, bookings_for_tab
from ..domain.days import NativeDay
from ..domain.exceptions import NotFoundError
from ..domain.models import AvailabilitySet, Booking
from ..domain.schedule import (
    ClockRange,
    WeeklySchedule,
    availability_payload,
    default_schedule,
    schedule_from_availability,
    set_day_hours,
)

logger = logging.getLogger(__name__)


class ManagementClientProtocol(Protocol):
    """Protocol describing the API client behaviour needed for management."""

    async def get_availability(self, availability_id: int | str) -> AvailabilitySet:
        """Return one availability set."""

    async def get_default_availability(self) -> AvailabilitySet | None:
        """Return the default availability set, if any."""

    async def create_availability(self, payload: Dict[str, Any]) -> AvailabilitySet:
        """Store a new availability set and return it."""

    async def update_availability(self, availability_id: int | str, payload: Dict[str, Any]) -> AvailabilitySet:
        """Replace an availability set and return it."""

    async def get_bookings(
        self,
        *,
        event_type_id: int | str | None = None,
        date: str | None = None,
        booking_status: str | None = None,
        client_email: str | None = None,
    ) -> List[Booking]:
        """Return bookings matching the filters."""

    async def cancel_booking(self, booking_id: int | str) -> Booking:
        """Cancel a booking and return it."""


class BookingManager:
    """
    Edits availability sets through the weekly schedule view and lists or
    cancels bookings.
    """

    def __init__(self, client: ManagementClientProtocol, timezone: str = "UTC") -> None:
        self._client = client
        self.timezone = timezone

    async def get_schedule(self, availability_id: int | str | None) -> Tuple[AvailabilitySet, WeeklySchedule]:
        """
        Load an availability set and its per-day schedule.

        ``None`` selects the default set.

        Raises:
            NotFoundError: If the set does not exist or no default is configured
        """
        if availability_id is None:
            availability = await self._client.get_default_availability()
            if availability is None:
                raise NotFoundError("No default availability configured")
        else:
            availability = await self._client.get_availability(availability_id)

        return availability, schedule_from_availability(availability)

    async def set_day_hours(
        self,
        availability_id: int | str | None,
        day: NativeDay,
        time_ranges: Sequence[ClockRange],
    ) -> AvailabilitySet:
        """
        Replace the hours of one weekday and save the availability set.

        An empty ``time_ranges`` marks the day as unavailable.

        Raises:
            ValueError: If a range is not a valid quarter-hour range
            SchedulingError: If loading or saving fails
        """
        availability, schedule = await self.get_schedule(availability_id)
        updated = set_day_hours(schedule, day, time_ranges)

        payload = availability_payload(updated, availability.name, availability.timezone)
        saved = await self._client.update_availability(availability.id, payload)

        logger.info("Saved %d interval(s) for availability %s", len(payload["intervals"]), availability.id)
        return saved

    async def create_availability(self, name: str, timezone: str | None = None) -> AvailabilitySet:
        """
        Create an availability set with the default working week.

        Raises:
            ValueError: If the name is blank
        """
        if not name or not name.strip():
            raise ValueError("Availability name must not be empty")

        payload = availability_payload(default_schedule(), name.strip(), timezone or self.timezone)
        return await self._client.create_availability(payload)

    async def list_bookings(
        self,
        tab: BookingTab | str = BookingTab.UPCOMING,
        now: DateTime | None = None,
        event_type_id: int | str | None = None,
    ) -> List[Booking]:
        """Fetch bookings and select the ones shown under ``tab``."""
        bookings = await self._client.get_bookings(event_type_id=event_type_id)
        return bookings_for_tab(bookings, tab, now or pendulum.now(self.timezone), self.timezone)

    async def cancel_booking(self, booking_id: int | str) -> Booking:
        """Cancel a booking."""
        booking = await self._client.cancel_booking(booking_id)
        logger.info("Cancelled booking %s", booking_id)
        return booking
