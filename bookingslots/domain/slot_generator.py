"""
Expansion of weekly availability into bookable start times for one date.

Pure domain logic: no API calls and no I/O beyond diagnostic logging.
"""

import logging
from datetime import date as Date, datetime
from typing import List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .availability_index import intervals_for
from .days import native_day_of
from .models import AvailabilitySet, SkippedInput, SlotResult, WeeklyInterval

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 15
BOOKING_BUFFER_MINUTES = 5


def effective_duration(duration_minutes, fallback: int = DEFAULT_SLOT_MINUTES) -> int:
    """Return the duration in whole minutes, or ``fallback`` if it is missing, non-numeric or not positive."""
    try:
        minutes = int(duration_minutes)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return minutes if minutes > 0 else fallback


def parse_clock(value) -> Optional[Tuple[int, int]]:
    """
    Parse ``HH:MM:SS`` or ``HH:MM`` into ``(hour, minute)``.

    A missing minute part counts as zero. ``24:00`` is accepted as the end
    of the day. Returns None for anything else.
    """
    if not isinstance(value, str):
        return None

    parts = value.split(":")
    try:
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return None

    if not 0 <= minute < 60 or not 0 <= hour <= 24:
        return None
    if hour == 24 and minute:
        return None

    return hour, minute


class SlotGenerator:
    """
    Generates candidate slot start times from an availability set.

    Algorithm:
    1. Look up the intervals stored for the date's day-of-week
    2. Parse each interval, skipping malformed or empty ones
    3. Anchor the interval to the date's wall clock in the target time zone
    4. Step through the interval by the event duration, keeping each start
       whose slot still ends inside the interval
    5. On the current day, drop starts earlier than now plus the buffer
    6. Merge all intervals and sort by instant
    """

    def __init__(
        self,
        booking_buffer_minutes: int = BOOKING_BUFFER_MINUTES,
        fallback_duration_minutes: int = DEFAULT_SLOT_MINUTES
    ):
        self.booking_buffer_minutes = booking_buffer_minutes
        self.fallback_duration_minutes = fallback_duration_minutes

    def generate_slots(
        self,
        availability: Optional[AvailabilitySet],
        date: Date,
        duration_minutes: int | None,
        now: datetime,
        timezone: str | None = None
    ) -> SlotResult:
        """
        Generate the ordered candidate slots for a calendar date.

        Args:
            availability: Weekly availability, or None when none could be resolved
            date: Selected calendar date; its day-of-week is used as is
            duration_minutes: Event duration; invalid values fall back to 15
            now: Current instant, used for the same-day cutoff
            timezone: Zone the wall-clock intervals live in. Defaults to the zone of ``now``

        Returns:
            SlotResult with slots sorted ascending and the skipped intervals
        """
        result = SlotResult()

        day_intervals = intervals_for(availability, native_day_of(date))
        if not day_intervals:
            return result

        now = _as_pendulum(now)
        tz = timezone or now.timezone
        calendar_date = date.date() if isinstance(date, datetime) else date
        step = effective_duration(duration_minutes, self.fallback_duration_minutes)

        is_today = now.in_timezone(tz).date() == calendar_date
        cutoff = now.add(minutes=self.booking_buffer_minutes)

        for interval in day_intervals:
            bounds = self._interval_bounds(interval, calendar_date, tz, result)
            if bounds is None:
                continue

            interval_start, interval_end = bounds
            for slot in self._expand_interval(interval_start, interval_end, step):
                if is_today and slot < cutoff:
                    continue
                result.slots.append(slot)

        result.slots.sort()
        return result

    def _interval_bounds(
        self,
        interval: WeeklyInterval,
        calendar_date: Date,
        tz,
        result: SlotResult
    ) -> Tuple[DateTime, DateTime] | None:
        """Anchor an interval to the date, or record it as skipped and return None."""
        start = parse_clock(interval.start_time)
        end = parse_clock(interval.end_time)

        if start is None or end is None:
            self._skip(interval, "unparsable time", result)
            return None

        interval_start = _anchor(calendar_date, *start, tz)
        interval_end = _anchor(calendar_date, *end, tz)

        if interval_end <= interval_start:
            self._skip(interval, "end time is not after start time", result)
            return None

        return interval_start, interval_end

    @staticmethod
    def _expand_interval(start: DateTime, end: DateTime, step: int) -> List[DateTime]:
        slots: List[DateTime] = []
        cursor = start
        while cursor.add(minutes=step) <= end:
            slots.append(cursor)
            cursor = cursor.add(minutes=step)
        return slots

    @staticmethod
    def _skip(interval: WeeklyInterval, reason: str, result: SlotResult) -> None:
        logger.warning("Skipping availability interval %s: %s", interval, reason)
        result.skipped.append(SkippedInput(kind="interval", reason=reason, record=interval))


def _as_pendulum(value: datetime) -> DateTime:
    if isinstance(value, DateTime):
        return value
    return pendulum.instance(value)


def _anchor(calendar_date: Date, hour: int, minute: int, tz) -> DateTime:
    if hour == 24:
        midnight = pendulum.datetime(calendar_date.year, calendar_date.month, calendar_date.day, tz=tz)
        return midnight.add(days=1)
    return pendulum.datetime(
        calendar_date.year,
        calendar_date.month,
        calendar_date.day,
        hour,
        minute,
        tz=tz
    )


def generate_slots(
    availability: Optional[AvailabilitySet],
    date: Date,
    duration_minutes: int | None,
    now: datetime,
    timezone: str | None = None
) -> List[DateTime]:
    """Generate the ordered candidate slots for a date using the default buffer."""
    return SlotGenerator().generate_slots(
        availability=availability,
        date=date,
        duration_minutes=duration_minutes,
        now=now,
        timezone=timezone
    ).slots
