"""
Removal of candidate slots that collide with existing bookings.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from .models import Booking, SkippedInput, SlotResult, TimeRange
from .slot_generator import DEFAULT_SLOT_MINUTES, effective_duration

logger = logging.getLogger(__name__)


class ConflictFilter:
    """
    Drops slots whose ``[start, start + duration)`` range overlaps a booking.

    Cancelled bookings never block. Bookings whose start or end cannot be
    parsed are skipped and reported instead of failing the whole call.
    Booking instants are compared absolutely, so time zones do not matter;
    ISO strings without an offset are read in ``timezone``.
    """

    def __init__(self, timezone: str = "UTC", fallback_duration_minutes: int = DEFAULT_SLOT_MINUTES):
        self.timezone = timezone
        self.fallback_duration_minutes = fallback_duration_minutes

    def filter_slots(
        self,
        slots: Sequence[DateTime],
        bookings: Optional[Iterable[Booking]],
        duration_minutes: int | None
    ) -> SlotResult:
        """
        Filter booked slots, preserving the order of the input.

        Args:
            slots: Candidate slot start times
            bookings: Existing bookings for the date (None or empty: nothing to filter)
            duration_minutes: Event duration used to compute each slot's end

        Returns:
            SlotResult with the remaining slots and any skipped bookings
        """
        result = SlotResult()
        blocking = self._blocking_ranges(bookings or [], result)

        if not blocking:
            result.slots = list(slots)
            return result

        step = effective_duration(duration_minutes, self.fallback_duration_minutes)

        for slot in slots:
            slot_range = TimeRange(start=slot, end=slot.add(minutes=step))
            conflict = next((busy for busy in blocking if slot_range.overlaps(busy)), None)
            if conflict is not None:
                logger.debug("Slot %s conflicts with booking %s", slot_range, conflict)
                continue
            result.slots.append(slot)

        return result

    def _blocking_ranges(self, bookings: Iterable[Booking], result: SlotResult) -> List[TimeRange]:
        """Convert active, well-formed bookings into time ranges."""
        ranges: List[TimeRange] = []

        for booking in bookings:
            if booking.is_cancelled:
                continue

            if not booking.start_time or not booking.end_time:
                self._skip(booking, "missing start_time or end_time", result)
                continue

            try:
                start = self._parse_instant(booking.start_time)
                end = self._parse_instant(booking.end_time)
                ranges.append(TimeRange(start=start, end=end))
            except ValueError as e:
                self._skip(booking, f"invalid booking times: {e}", result)

        return ranges

    def _parse_instant(self, value: str) -> DateTime:
        parsed = pendulum.parse(value, tz=self.timezone)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Could not parse datetime: {value}")
        return parsed

    @staticmethod
    def _skip(booking: Booking, reason: str, result: SlotResult) -> None:
        logger.warning("Ignoring booking %s: %s", booking.id, reason)
        result.skipped.append(SkippedInput(kind="booking", reason=reason, record=booking))


def filter_booked_slots(
    slots: Sequence[DateTime],
    bookings: Optional[Iterable[Booking]],
    duration_minutes: int | None
) -> List[DateTime]:
    """Filter booked slots with the default settings and return the remaining slots."""
    return ConflictFilter().filter_slots(slots, bookings, duration_minutes).slots
