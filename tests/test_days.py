"""
Tests for day-of-week and clock-string conventions.
"""

from datetime import date

import pendulum
import pytest

from bookingslots.domain.days import (
    DAY_LABELS,
    TIME_OPTIONS,
    NativeDay,
    StorageDay,
    format_clock_12h,
    native_day_of,
    to_display_clock,
    to_native_day,
    to_storage_clock,
    to_storage_day,
)


class TestDayConventions:
    """Tests for native <-> storage day conversion."""

    def test_sunday_maps_to_seven(self):
        """Sunday is 0 natively and 7 in storage."""
        assert to_storage_day(0) == StorageDay.SUNDAY == 7
        assert to_native_day(7) == NativeDay.SUNDAY == 0

    def test_weekdays_keep_their_number(self):
        """Monday to Saturday share the same number in both conventions."""
        for day in range(1, 7):
            assert int(to_storage_day(day)) == day
            assert int(to_native_day(day)) == day

    @pytest.mark.parametrize("native", range(7))
    def test_native_round_trip(self, native):
        """Converting to storage and back yields the original day."""
        assert to_native_day(to_storage_day(native)) == native

    @pytest.mark.parametrize("storage", range(1, 8))
    def test_storage_round_trip(self, storage):
        assert to_storage_day(to_native_day(storage)) == storage

    def test_returns_typed_values(self):
        assert isinstance(to_storage_day(NativeDay.MONDAY), StorageDay)
        assert isinstance(to_native_day(StorageDay.MONDAY), NativeDay)


class TestNativeDayOf:
    """Tests for deriving the day-of-week of a calendar date."""

    def test_plain_dates(self):
        assert native_day_of(date(2024, 11, 24)) == NativeDay.SUNDAY
        assert native_day_of(date(2024, 11, 25)) == NativeDay.MONDAY
        assert native_day_of(date(2024, 11, 23)) == NativeDay.SATURDAY

    def test_datetime_uses_its_own_wall_clock_date(self):
        """Late Sunday evening in New York is Monday in UTC, but stays Sunday."""
        late_sunday = pendulum.datetime(2024, 11, 24, 23, 30, tz="America/New_York")

        assert native_day_of(late_sunday) == NativeDay.SUNDAY


class TestClockStrings:
    """Tests for HH:MM <-> HH:MM:SS conversion."""

    def test_to_display_truncates_seconds(self):
        assert to_display_clock("09:30:00") == "09:30"

    def test_to_display_passes_through(self):
        assert to_display_clock("09:30") == "09:30"

    def test_to_storage_pads_seconds(self):
        assert to_storage_clock("17:00") == "17:00:00"

    def test_to_storage_passes_through(self):
        assert to_storage_clock("17:00:00") == "17:00:00"

    def test_round_trips(self):
        assert to_display_clock(to_storage_clock("08:15")) == "08:15"
        assert to_storage_clock(to_display_clock("08:15:00")) == "08:15:00"

    def test_empty_values_use_default(self):
        assert to_display_clock("") == "09:00"
        assert to_storage_clock(None) == "09:00:00"

    def test_format_clock_12h(self):
        assert format_clock_12h("17:30:00") == "5:30 PM"
        assert format_clock_12h("09:00") == "9:00 AM"
        assert format_clock_12h("00:15") == "12:15 AM"
        assert format_clock_12h("12:00") == "12:00 PM"

    def test_format_clock_12h_unparsable(self):
        assert format_clock_12h("noon") == "noon"


class TestLookupTables:
    """Tests for the static lookup tables."""

    def test_time_options_cover_the_day_in_quarter_hours(self):
        assert len(TIME_OPTIONS) == 96
        assert TIME_OPTIONS[0] == ("00:00", "12:00 am")
        assert TIME_OPTIONS[-1] == ("23:45", "11:45 pm")

    def test_day_labels_are_read_only(self):
        assert DAY_LABELS[NativeDay.SUNDAY] == "Sunday"
        with pytest.raises(TypeError):
            DAY_LABELS[NativeDay.SUNDAY] = "Sun"
