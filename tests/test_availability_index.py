"""
Tests for the per-day availability lookup.
"""

from bookingslots.domain.availability_index import (
    days_with_availability,
    has_availability,
    intervals_for,
)
from bookingslots.domain.days import NativeDay
from bookingslots.domain.models import AvailabilitySet, WeeklyInterval


def _split_shift_set() -> AvailabilitySet:
    return AvailabilitySet(
        id=7,
        name="Split",
        intervals=[
            WeeklyInterval(day_of_week=1, start_time="14:00:00", end_time="18:00:00"),
            WeeklyInterval(day_of_week=7, start_time="10:00:00", end_time="12:00:00"),
            WeeklyInterval(day_of_week=1, start_time="08:00:00", end_time="12:00:00"),
        ],
    )


class TestHasAvailability:
    """Tests for has_availability."""

    def test_no_set(self):
        assert not has_availability(None, NativeDay.MONDAY)

    def test_set_without_intervals(self):
        assert not has_availability(AvailabilitySet(id=1), NativeDay.MONDAY)

    def test_matching_day(self, monday_availability):
        assert has_availability(monday_availability, NativeDay.MONDAY)
        assert not has_availability(monday_availability, NativeDay.TUESDAY)

    def test_sunday_uses_storage_day_seven(self):
        """A native Sunday (0) matches intervals stored with day 7."""
        availability = _split_shift_set()

        assert has_availability(availability, NativeDay.SUNDAY)
        assert not has_availability(availability, NativeDay.SATURDAY)


class TestIntervalsFor:
    """Tests for intervals_for."""

    def test_keeps_stored_order(self):
        intervals = intervals_for(_split_shift_set(), NativeDay.MONDAY)

        assert [i.start_time for i in intervals] == ["14:00:00", "08:00:00"]

    def test_no_match(self):
        assert intervals_for(_split_shift_set(), NativeDay.FRIDAY) == []

    def test_no_set(self):
        assert intervals_for(None, NativeDay.FRIDAY) == []


class TestDaysWithAvailability:
    """Tests for days_with_availability."""

    def test_distinct_native_days(self):
        assert days_with_availability(_split_shift_set()) == [NativeDay.MONDAY, NativeDay.SUNDAY]

    def test_ignores_out_of_range_days(self):
        availability = AvailabilitySet(
            id=1,
            intervals=[WeeklyInterval(day_of_week=9, start_time="09:00", end_time="10:00")],
        )

        assert days_with_availability(availability) == []

    def test_no_set(self):
        assert days_with_availability(None) == []
