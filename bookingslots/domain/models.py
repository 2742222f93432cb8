"""
Domain models for availability, bookings and slot results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List

from pendulum import DateTime


class BookingStatus(str, Enum):
    """Lifecycle states of a booking."""
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class WeeklyInterval:
    """
    One recurring availability window.

    ``day_of_week`` uses the storage convention (Monday=1 .. Sunday=7).
    Times are kept as the raw strings received (``HH:MM:SS`` or ``HH:MM``)
    so that malformed records can reach the slot generator, which skips them.
    """
    day_of_week: int
    start_time: str
    end_time: str


@dataclass
class AvailabilitySet:
    """Named weekly availability definition."""
    id: int | str | None
    name: str = ""
    timezone: str = "UTC"
    intervals: List[WeeklyInterval] = field(default_factory=list)

    def has_intervals(self) -> bool:
        return bool(self.intervals)


@dataclass(frozen=True)
class Booking:
    """An existing booking as returned by the API."""
    id: int | str | None
    event_type_id: int | str | None = None
    start_time: str | None = None  # ISO-8601
    end_time: str | None = None  # ISO-8601
    status: str = BookingStatus.CONFIRMED.value
    name: str = ""
    client_email: str = ""

    @property
    def is_cancelled(self) -> bool:
        return (self.status or "").lower() == BookingStatus.CANCELLED.value


@dataclass(frozen=True)
class EventType:
    """Bookable event type. Only the fields slot lookup needs are modelled."""
    id: int | str
    slug: str = ""
    name: str = ""
    duration: int | None = None  # minutes
    availability_id: int | str | None = None


@dataclass(frozen=True)
class TimeRange:
    """
    Immutable half-open time range ``[start, end)``.

    Invariant: start must not be after end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ends do not overlap."""
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class SkippedInput:
    """A degraded input record that was ignored instead of failing the call."""
    kind: str  # "interval" or "booking"
    reason: str
    record: Any


@dataclass
class SlotResult:
    """Ordered slot instants plus any inputs skipped while computing them."""
    slots: List[DateTime] = field(default_factory=list)
    skipped: List[SkippedInput] = field(default_factory=list)

    def __iter__(self) -> Iterator[DateTime]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)
