"""
Shared fixtures for the booking slot tests.
"""

import pytest

from bookingslots.domain.models import AvailabilitySet, WeeklyInterval

TZ = "Europe/Berlin"


@pytest.fixture
def monday_availability() -> AvailabilitySet:
    """One Monday interval, 09:00-17:00."""
    return AvailabilitySet(
        id=1,
        name="Mondays",
        timezone=TZ,
        intervals=[WeeklyInterval(day_of_week=1, start_time="09:00:00", end_time="17:00:00")],
    )


@pytest.fixture
def weekday_availability() -> AvailabilitySet:
    """Monday to Friday, 09:00-17:00."""
    return AvailabilitySet(
        id=2,
        name="Working hours",
        timezone=TZ,
        intervals=[
            WeeklyInterval(day_of_week=day, start_time="09:00:00", end_time="17:00:00")
            for day in range(1, 6)
        ],
    )
