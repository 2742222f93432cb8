"""
Per-day lookup over a weekly availability set.

Used by the date picker to disable days without availability and by the
slot generator to find the windows to expand.
"""

from typing import List, Optional

from .days import NativeDay, to_native_day, to_storage_day
from .models import AvailabilitySet, WeeklyInterval


def intervals_for(
    availability: Optional[AvailabilitySet],
    native_day: int
) -> List[WeeklyInterval]:
    """
    Get all intervals stored for a native day-of-week, in stored order.
    """
    if availability is None or not availability.intervals:
        return []

    storage_day = to_storage_day(native_day)
    return [
        interval for interval in availability.intervals
        if interval.day_of_week == storage_day
    ]


def has_availability(availability: Optional[AvailabilitySet], native_day: int) -> bool:
    """Check whether any interval exists for a native day-of-week."""
    return bool(intervals_for(availability, native_day))


def days_with_availability(availability: Optional[AvailabilitySet]) -> List[NativeDay]:
    """
    Get the distinct native days that have at least one interval.

    Intervals with a day number outside the storage range are ignored.
    """
    if availability is None or not availability.intervals:
        return []

    days: List[NativeDay] = []
    for interval in availability.intervals:
        try:
            day = to_native_day(interval.day_of_week)
        except ValueError:
            continue
        if day not in days:
            days.append(day)
    return days
