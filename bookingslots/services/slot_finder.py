"""
Application services for looking up bookable slots of an event type.

The service resolves which availability governs an event type, fetches the
existing bookings for the selected date, and delegates slot generation and
conflict filtering to the domain layer. The API dependency is a simple
protocol so tests and the CLI mock mode can plug in their own client.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date as Date, datetime, timedelta
from typing import Any, Dict, List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.availability_index import has_availability
from ..domain.conflict_filter import ConflictFilter
from ..domain.days import native_day_of
from ..domain.exceptions import SchedulingError
from ..domain.models import AvailabilitySet, Booking, BookingStatus, EventType, SlotResult
from ..domain.slot_generator import SlotGenerator, effective_duration

logger = logging.getLogger(__name__)

DEFAULT_EVENT_DURATION = 30
BOOKING_WINDOW_DAYS = 30


class SchedulingClientProtocol(Protocol):
    """Protocol describing the API client behaviour needed by the service."""

    async def get_availability(self, availability_id: int | str) -> AvailabilitySet:
        """Return one availability set."""

    async def get_default_availability(self) -> AvailabilitySet | None:
        """Return the default availability set, if any."""

    async def get_bookings(
        self,
        *,
        event_type_id: int | str | None = None,
        date: str | None = None,
        booking_status: str | None = None,
        client_email: str | None = None,
    ) -> List[Booking]:
        """Return bookings matching the filters."""

    async def get_event_type_by_slug(self, slug: str) -> EventType:
        """Return the event type published under a slug."""

    async def create_booking(self, payload: Dict[str, Any]) -> Booking:
        """Store a booking and return it."""


class SlotFinderService:
    """
    Orchestrates availability resolution, booking retrieval and slot calculation.
    """

    def __init__(
        self,
        client: SchedulingClientProtocol,
        slot_generator: SlotGenerator | None = None,
        conflict_filter: ConflictFilter | None = None,
        timezone: str = "UTC",
        default_duration_minutes: int = DEFAULT_EVENT_DURATION,
        booking_window_days: int = BOOKING_WINDOW_DAYS,
    ) -> None:
        self._client = client
        self._slot_generator = slot_generator or SlotGenerator()
        self._conflict_filter = conflict_filter or ConflictFilter(timezone=timezone)
        self.timezone = timezone
        self.default_duration_minutes = default_duration_minutes
        self.booking_window_days = booking_window_days

    async def get_event_type(self, slug: str) -> EventType:
        """Fetch the event type published under a slug."""
        return await self._client.get_event_type_by_slug(slug)

    async def get_availability(self, availability_id: int | str | None) -> Optional[AvailabilitySet]:
        """Fetch an availability set by id; None selects the default one."""
        if availability_id is None:
            return await self._client.get_default_availability()
        return await self._client.get_availability(availability_id)

    def duration_for(self, event_type: EventType) -> int:
        """Event duration in minutes, falling back to the default when unset or not positive."""
        return effective_duration(event_type.duration, self.default_duration_minutes)

    async def resolve_availability(self, event_type: EventType) -> Optional[AvailabilitySet]:
        """
        Resolve the availability governing an event type.

        Priority:
        1. The event's own availability, if it has at least one interval
        2. The default availability
        3. None (no slots on any date)

        The event-specific and default sets are fetched concurrently.
        """
        if event_type.availability_id is None:
            return await self._fetch_default_availability()

        specific, default = await asyncio.gather(
            self._fetch_event_availability(event_type.availability_id),
            self._fetch_default_availability(),
        )

        if specific is not None and specific.has_intervals():
            return specific

        logger.info(
            "Event type %s has no usable availability, using the default",
            event_type.id,
        )
        return default

    async def fetch_bookings(self, event_type: EventType, date: Date) -> List[Booking]:
        """Fetch confirmed bookings of an event type on a date. Failures yield an empty list."""
        try:
            return await self._client.get_bookings(
                event_type_id=event_type.id,
                date=date.isoformat(),
                booking_status=BookingStatus.CONFIRMED.value,
            )
        except SchedulingError as e:
            logger.warning("Failed to load bookings for %s: %s", date.isoformat(), e)
            return []

    def bookable_dates(
        self,
        availability: Optional[AvailabilitySet],
        today: Date,
        days: int | None = None,
    ) -> List[Date]:
        """Dates from ``today`` on, within the booking window, that have availability."""
        window = days if days is not None else self.booking_window_days
        candidates = (today + timedelta(days=offset) for offset in range(window))
        return [day for day in candidates if has_availability(availability, native_day_of(day))]

    async def find_slots(
        self,
        *,
        event_type: EventType,
        date: Date,
        now: DateTime | None = None,
    ) -> SlotResult:
        """
        Find the bookable slots of an event type on a date.

        Past dates yield no slots. Availability and bookings are fetched
        concurrently and both complete before slots are generated.
        """
        now = now or pendulum.now(self.timezone)
        calendar_date = date.date() if isinstance(date, datetime) else date

        if calendar_date < now.in_timezone(self.timezone).date():
            logger.info("Refusing slot lookup for past date %s", calendar_date.isoformat())
            return SlotResult()

        availability, bookings = await asyncio.gather(
            self.resolve_availability(event_type),
            self.fetch_bookings(event_type, calendar_date),
        )

        return self.calculate_slots(
            availability=availability,
            bookings=bookings,
            date=calendar_date,
            duration_minutes=self.duration_for(event_type),
            now=now,
        )

    async def find_slots_by_slug(
        self,
        *,
        slug: str,
        date: Date,
        now: DateTime | None = None,
    ) -> SlotResult:
        """Look up an event type by slug, then find its slots."""
        event_type = await self.get_event_type(slug)
        return await self.find_slots(event_type=event_type, date=date, now=now)

    def calculate_slots(
        self,
        *,
        availability: Optional[AvailabilitySet],
        bookings: List[Booking],
        date: Date,
        duration_minutes: int,
        now: DateTime,
    ) -> SlotResult:
        """Generate slots from availability and drop the booked ones."""
        generated = self._slot_generator.generate_slots(
            availability=availability,
            date=date,
            duration_minutes=duration_minutes,
            now=now,
            timezone=self.timezone,
        )
        filtered = self._conflict_filter.filter_slots(generated.slots, bookings, duration_minutes)

        return SlotResult(
            slots=filtered.slots,
            skipped=generated.skipped + filtered.skipped,
        )

    def build_booking_payload(
        self,
        *,
        event_type: EventType,
        slot: DateTime,
        name: str,
        email: str,
        notes: str | None = None,
        meeting_link: str | None = None,
    ) -> Dict[str, Any]:
        """
        Build the API body for booking a slot.

        ``start_time``/``end_time`` are UTC ISO strings; ``date`` is the
        slot's own calendar date.
        """
        end = slot.add(minutes=self.duration_for(event_type))

        return {
            "event_type_id": event_type.id,
            "name": name or "",
            "client_email": email or "",
            "additional_notes": notes or None,
            "start_time": slot.in_timezone("UTC").to_iso8601_string(),
            "end_time": end.in_timezone("UTC").to_iso8601_string(),
            "date": slot.to_date_string(),
            "meeting_link": meeting_link,
            "booking_status": BookingStatus.CONFIRMED.value,
        }

    async def book_slot(
        self,
        *,
        event_type: EventType,
        slot: DateTime,
        name: str,
        email: str,
        notes: str | None = None,
        now: DateTime | None = None,
    ) -> Booking:
        """
        Book a slot through the API.

        Raises:
            SchedulingError: If the slot is not in the future
        """
        now = now or pendulum.now(self.timezone)
        if slot <= now:
            raise SchedulingError(f"Cannot book a slot in the past: {slot.to_iso8601_string()}")

        payload = self.build_booking_payload(
            event_type=event_type,
            slot=slot,
            name=name,
            email=email,
            notes=notes,
        )
        return await self._client.create_booking(payload)

    async def _fetch_event_availability(self, availability_id: int | str) -> Optional[AvailabilitySet]:
        try:
            return await self._client.get_availability(availability_id)
        except SchedulingError as e:
            logger.warning("Failed to load availability %s: %s", availability_id, e)
            return None

    async def _fetch_default_availability(self) -> Optional[AvailabilitySet]:
        try:
            return await self._client.get_default_availability()
        except SchedulingError as e:
            logger.warning("Failed to load default availability: %s", e)
            return None
