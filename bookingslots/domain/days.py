"""
Day-of-week and clock-string conventions.

Two day numberings coexist:

- ``NativeDay``: calendar numbering, Sunday=0 .. Saturday=6
- ``StorageDay``: persisted interval numbering, Monday=1 .. Sunday=7

Only the adapter functions below convert between them. Clock strings are
stored as ``HH:MM:SS`` and displayed/edited as ``HH:MM``.
"""

import re
from datetime import date as Date, datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Tuple


class NativeDay(IntEnum):
    """Calendar day-of-week numbering (Sunday=0)."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


class StorageDay(IntEnum):
    """Persisted day-of-week numbering (Monday=1, Sunday=7)."""
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


DEFAULT_DISPLAY_CLOCK = "09:00"
DEFAULT_STORAGE_CLOCK = "09:00:00"

_DISPLAY_CLOCK_RE = re.compile(r"^\d{2}:\d{2}$")
_STORAGE_CLOCK_RE = re.compile(r"^\d{2}:\d{2}:\d{2}$")


def to_storage_day(native_day: int) -> StorageDay:
    """Convert a native day (Sunday=0) to the storage convention (Sunday=7)."""
    return StorageDay(7 if native_day == 0 else native_day)


def to_native_day(storage_day: int) -> NativeDay:
    """Convert a storage day (Sunday=7) to the native convention (Sunday=0)."""
    return NativeDay(0 if storage_day == 7 else storage_day)


def native_day_of(value: Date) -> NativeDay:
    """
    Get the native day-of-week of a calendar date.

    A datetime is reduced to its own wall-clock date; no time zone
    conversion happens here.
    """
    if isinstance(value, datetime):
        value = value.date()
    return NativeDay(value.isoweekday() % 7)


def to_display_clock(value: str | None) -> str:
    """Convert ``HH:MM:SS`` to ``HH:MM``. ``HH:MM`` passes through unchanged."""
    if not value:
        return DEFAULT_DISPLAY_CLOCK
    if _DISPLAY_CLOCK_RE.match(value):
        return value
    return value[:5]


def to_storage_clock(value: str | None) -> str:
    """Convert ``HH:MM`` to ``HH:MM:SS``. ``HH:MM:SS`` passes through unchanged."""
    if not value:
        return DEFAULT_STORAGE_CLOCK
    if _STORAGE_CLOCK_RE.match(value):
        return value
    return f"{value}:00"


def format_clock_12h(value: str) -> str:
    """
    Format a 24-hour clock string as a 12-hour label.

    Example: ``"17:30:00"`` -> ``"5:30 PM"``. Unparsable values are
    returned as given.
    """
    parts = value.split(":")
    try:
        hour = int(parts[0])
    except ValueError:
        return value
    minutes = parts[1] if len(parts) > 1 and parts[1] else "00"
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def _build_time_options() -> Tuple[Tuple[str, str], ...]:
    # Quarter-hour steps over a full day: ("13:15", "1:15 pm")
    options = []
    for hour in range(24):
        for minute in range(0, 60, 15):
            value = f"{hour:02d}:{minute:02d}"
            options.append((value, format_clock_12h(value).lower()))
    return tuple(options)


DAY_LABELS: Mapping[NativeDay, str] = MappingProxyType({
    NativeDay.SUNDAY: "Sunday",
    NativeDay.MONDAY: "Monday",
    NativeDay.TUESDAY: "Tuesday",
    NativeDay.WEDNESDAY: "Wednesday",
    NativeDay.THURSDAY: "Thursday",
    NativeDay.FRIDAY: "Friday",
    NativeDay.SATURDAY: "Saturday",
})

TIME_OPTIONS: Tuple[Tuple[str, str], ...] = _build_time_options()

TIMEZONE_LABELS: Mapping[str, str] = MappingProxyType({
    "UTC": "UTC (Coordinated Universal Time)",
    "America/New_York": "Eastern Time (ET)",
    "America/Chicago": "Central Time (CT)",
    "America/Denver": "Mountain Time (MT)",
    "America/Los_Angeles": "Pacific Time (PT)",
    "Europe/London": "London (GMT)",
    "Europe/Paris": "Paris (CET)",
    "Europe/Berlin": "Berlin (CET)",
    "Asia/Tokyo": "Tokyo (JST)",
    "Asia/Shanghai": "Shanghai (CST)",
    "Asia/Kolkata": "Mumbai, Kolkata (IST)",
    "Australia/Sydney": "Sydney (AEDT)",
    "Pacific/Auckland": "Auckland (NZDT)",
    "America/Toronto": "Toronto (EST)",
    "America/Vancouver": "Vancouver (PST)",
    "America/Mexico_City": "Mexico City (CST)",
    "America/Sao_Paulo": "São Paulo (BRT)",
    "Europe/Moscow": "Moscow (MSK)",
    "Asia/Dubai": "Dubai (GST)",
    "Asia/Singapore": "Singapore (SGT)",
    "Asia/Hong_Kong": "Hong Kong (HKT)",
    "Asia/Seoul": "Seoul (KST)",
})
