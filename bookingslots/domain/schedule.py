"""
Editable weekly schedule keyed by native day.

The availability editor works on a per-day view (enabled flag plus one or
more ``HH:MM`` ranges). These helpers convert between that view and the
stored interval list, and render a short human-readable summary.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .days import (
    DAY_LABELS,
    TIME_OPTIONS,
    NativeDay,
    format_clock_12h,
    to_display_clock,
    to_native_day,
    to_storage_clock,
    to_storage_day,
)
from .models import AvailabilitySet, WeeklyInterval

DEFAULT_RANGE: Tuple[str, str] = ("09:00", "17:00")

ClockRange = Tuple[str, str]

_TIME_OPTION_VALUES = frozenset(value for value, _ in TIME_OPTIONS)


@dataclass
class DaySchedule:
    """Availability of a single weekday in the editor."""
    enabled: bool = False
    time_ranges: List[ClockRange] = field(default_factory=lambda: [DEFAULT_RANGE])


WeeklySchedule = Dict[NativeDay, DaySchedule]


def default_schedule() -> WeeklySchedule:
    """Monday to Friday enabled 09:00-17:00, weekend disabled."""
    weekend = (NativeDay.SATURDAY, NativeDay.SUNDAY)
    return {day: DaySchedule(enabled=day not in weekend) for day in NativeDay}


def schedule_from_availability(availability: Optional[AvailabilitySet]) -> WeeklySchedule:
    """
    Build the per-day editor view of an availability set.

    Days without intervals are disabled and keep the default range.
    """
    schedule = {day: DaySchedule() for day in NativeDay}
    if availability is None:
        return schedule

    by_day: Dict[NativeDay, List[ClockRange]] = {}
    for interval in availability.intervals:
        try:
            day = to_native_day(interval.day_of_week)
        except ValueError:
            continue
        by_day.setdefault(day, []).append(
            (to_display_clock(interval.start_time), to_display_clock(interval.end_time))
        )

    for day, ranges in by_day.items():
        schedule[day] = DaySchedule(enabled=True, time_ranges=ranges)

    return schedule


def schedule_to_intervals(schedule: WeeklySchedule) -> List[WeeklyInterval]:
    """Flatten enabled days into storage-form intervals."""
    intervals: List[WeeklyInterval] = []

    for day in sorted(schedule):
        day_schedule = schedule[day]
        if not day_schedule.enabled:
            continue
        for start, end in day_schedule.time_ranges:
            if not start or not end:
                continue
            intervals.append(WeeklyInterval(
                day_of_week=int(to_storage_day(day)),
                start_time=to_storage_clock(start),
                end_time=to_storage_clock(end),
            ))

    return intervals


def summarize(schedule: WeeklySchedule) -> List[str]:
    """
    Summarize a schedule into lines such as ``"Mon - Fri: 9:00 AM - 5:00 PM"``.

    Consecutive enabled days sharing the same first range are grouped.
    """
    enabled_days = [day for day in NativeDay if schedule.get(day) and schedule[day].enabled]
    if not enabled_days:
        return ["No availability set"]

    groups: List[Tuple[List[NativeDay], str]] = []
    for day in enabled_days:
        ranges = schedule[day].time_ranges
        if not ranges:
            continue
        start, end = ranges[0]
        time_str = f"{format_clock_12h(start)} - {format_clock_12h(end)}"

        if groups and groups[-1][1] == time_str:
            groups[-1][0].append(day)
        else:
            groups.append(([day], time_str))

    return [f"{_format_days(days)}: {time_str}" for days, time_str in groups]


def _format_days(days: List[NativeDay]) -> str:
    labels = [DAY_LABELS[day][:3] for day in days]
    if len(days) == 1:
        return labels[0]
    if len(days) == 2:
        return f"{labels[0]} - {labels[1]}"
    if days[-1] - days[0] == len(days) - 1:
        return f"{labels[0]} - {labels[-1]}"
    return ", ".join(labels)


def set_day_hours(
    schedule: WeeklySchedule,
    day: NativeDay,
    time_ranges: Sequence[ClockRange]
) -> WeeklySchedule:
    """
    Return a copy of ``schedule`` with ``day`` set to ``time_ranges``.

    An empty sequence disables the day. Every clock must be one of the
    quarter-hour ``TIME_OPTIONS`` values and each range must end after it
    starts.

    Raises:
        ValueError: If a range is not a valid editor range
    """
    for start, end in time_ranges:
        for clock in (start, end):
            if clock not in _TIME_OPTION_VALUES:
                raise ValueError(f"{clock} is not a quarter-hour time between 00:00 and 23:45")
        if end <= start:
            raise ValueError(f"End time {end} must be after start time {start}")

    updated = dict(schedule)
    if time_ranges:
        updated[day] = DaySchedule(enabled=True, time_ranges=list(time_ranges))
    else:
        updated[day] = DaySchedule()
    return updated


def availability_payload(schedule: WeeklySchedule, name: str, timezone: str = "UTC") -> Dict[str, Any]:
    """API body for creating or updating an availability set from a schedule."""
    return {
        "name": name,
        "timezone": timezone or "UTC",
        "intervals": [asdict(interval) for interval in schedule_to_intervals(schedule)],
    }
