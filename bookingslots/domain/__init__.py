"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_index import days_with_availability, has_availability, intervals_for
from .booking_list import BookingTab, bookings_for_tab
from .conflict_filter import ConflictFilter, filter_booked_slots
from .days import NativeDay, StorageDay, to_native_day, to_storage_day
from .models import (
    AvailabilitySet,
    Booking,
    BookingStatus,
    EventType,
    SkippedInput,
    SlotResult,
    TimeRange,
    WeeklyInterval,
)
from .slot_generator import SlotGenerator, generate_slots

__all__ = [
    "AvailabilitySet",
    "Booking",
    "BookingStatus",
    "BookingTab",
    "ConflictFilter",
    "EventType",
    "NativeDay",
    "SkippedInput",
    "SlotGenerator",
    "SlotResult",
    "StorageDay",
    "TimeRange",
    "WeeklyInterval",
    "bookings_for_tab",
    "days_with_availability",
    "filter_booked_slots",
    "generate_slots",
    "has_availability",
    "intervals_for",
    "to_native_day",
    "to_storage_day",
]
