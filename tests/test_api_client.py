"""
Tests for the REST API client and the mock client.
"""

import asyncio
from typing import Any, Dict, List

import pytest
import requests

from bookingslots.adapters.api_client import (
    SchedulingAPIClient,
    parse_availability,
    parse_booking,
    parse_event_type,
    unwrap,
)
from bookingslots.adapters.mock_api_client import MockSchedulingClient
from bookingslots.domain.exceptions import BookingAPIError, NotFoundError


class FakeResponse:
    """Just enough of requests.Response for the client."""

    def __init__(self, status_code: int = 200, body: Any = None, text: str = "", reason: str = ""):
        self.status_code = status_code
        self._body = body
        self.text = text
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON")
        return self._body


class FakeSession:
    """Records requests and replays canned responses."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response or FakeResponse(body={})
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: FakeSession) -> SchedulingAPIClient:
    return SchedulingAPIClient(base_url="http://api.test/", timeout=5, session=session)


AVAILABILITY = {
    "id": 5,
    "name": "Working hours",
    "timezone": "Europe/Berlin",
    "intervals": [
        {"day_of_week": 1, "start_time": "09:00:00", "end_time": "17:00:00"},
        {"day_of_week": "7", "start_time": "10:00", "end_time": "12:00"},
    ],
}


class TestSchedulingAPIClient:
    """Tests for SchedulingAPIClient."""

    def test_get_availability_unwraps_envelope(self):
        session = FakeSession(FakeResponse(body={"data": AVAILABILITY}))

        availability = asyncio.run(_client(session).get_availability(5))

        assert availability.id == 5
        assert availability.timezone == "Europe/Berlin"
        assert [i.day_of_week for i in availability.intervals] == [1, 7]
        assert session.requests[0]["url"] == "http://api.test/availability/5"
        assert session.requests[0]["timeout"] == 5

    def test_missing_availability_raises_not_found(self):
        session = FakeSession(FakeResponse(status_code=404, body={"message": "nope"}))

        with pytest.raises(NotFoundError):
            asyncio.run(_client(session).get_availability(5))

    def test_missing_default_availability_is_none(self):
        session = FakeSession(FakeResponse(status_code=404, body={}))

        assert asyncio.run(_client(session).get_default_availability()) is None

    def test_server_error_raises_with_message(self):
        session = FakeSession(FakeResponse(status_code=500, body={"message": "database down"}))

        with pytest.raises(BookingAPIError, match="database down"):
            asyncio.run(_client(session).get_default_availability())

    def test_network_error_is_wrapped(self):
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(BookingAPIError, match="refused"):
            asyncio.run(_client(session).get_event_type(1))

    def test_invalid_json_raises(self):
        session = FakeSession(FakeResponse(status_code=200, body=None, text="<html>"))

        with pytest.raises(BookingAPIError, match="Invalid JSON"):
            asyncio.run(_client(session).get_event_type(1))

    def test_get_bookings_sends_only_given_filters(self):
        body = [
            {"id": 1, "start_time": "2024-11-25T10:00:00Z", "end_time": "2024-11-25T10:30:00Z",
             "booking_status": "confirmed"},
            {"id": 2, "start_time": "2024-11-25T11:00:00Z", "end_time": "2024-11-25T11:30:00Z",
             "status": "Cancelled"},
        ]
        session = FakeSession(FakeResponse(body={"data": body}))

        bookings = asyncio.run(_client(session).get_bookings(
            event_type_id=1, date="2024-11-25", booking_status="confirmed"
        ))

        assert session.requests[0]["params"] == {
            "event_type_id": 1,
            "date": "2024-11-25",
            "booking_status": "confirmed",
        }
        assert [b.status for b in bookings] == ["confirmed", "cancelled"]
        assert bookings[1].is_cancelled

    def test_get_bookings_keeps_falsy_filters(self):
        session = FakeSession(FakeResponse(body=[]))

        asyncio.run(_client(session).get_bookings(event_type_id=0))

        assert session.requests[0]["params"] == {"event_type_id": 0}

    def test_create_booking_posts_json(self):
        payload = {"event_type_id": 1, "start_time": "a", "end_time": "b"}
        session = FakeSession(FakeResponse(status_code=201, body={"data": {"id": 7, **payload}}))

        booking = asyncio.run(_client(session).create_booking(payload))

        assert booking.id == 7
        assert session.requests[0]["method"] == "POST"
        assert session.requests[0]["json"] == payload

    def test_update_availability_puts_json(self):
        payload = {"name": "Working hours", "timezone": "UTC", "intervals": []}
        session = FakeSession(FakeResponse(body={"data": {"id": 5, **payload}}))

        availability = asyncio.run(_client(session).update_availability(5, payload))

        assert availability.id == 5
        assert session.requests[0]["method"] == "PUT"
        assert session.requests[0]["url"] == "http://api.test/availability/5"
        assert session.requests[0]["json"] == payload

    def test_create_availability_posts_json(self):
        payload = {"name": "Evenings", "timezone": "UTC", "intervals": []}
        session = FakeSession(FakeResponse(status_code=201, body={"id": 9, **payload}))

        availability = asyncio.run(_client(session).create_availability(payload))

        assert availability.id == 9
        assert availability.name == "Evenings"
        assert session.requests[0]["method"] == "POST"
        assert session.requests[0]["url"] == "http://api.test/availability"

    def test_cancel_booking_sets_status(self):
        session = FakeSession(FakeResponse(body={"id": 3, "booking_status": "cancelled"}))

        booking = asyncio.run(_client(session).cancel_booking(3))

        assert booking.is_cancelled
        assert session.requests[0]["method"] == "PUT"
        assert session.requests[0]["url"] == "http://api.test/bookings/3"
        assert session.requests[0]["json"] == {"booking_status": "cancelled"}


class TestPayloadParsing:
    """Tests for the payload parsers."""

    def test_unwrap(self):
        assert unwrap({"data": []}) == []
        assert unwrap([1]) == [1]
        assert unwrap({"id": 1}) == {"id": 1}

    def test_intervals_without_day_are_dropped(self):
        availability = parse_availability({
            "id": 1,
            "intervals": [
                {"start_time": "09:00:00", "end_time": "10:00:00"},
                {"day_of_week": "x", "start_time": "09:00:00", "end_time": "10:00:00"},
                {"day_of_week": 2, "start_time": None, "end_time": "10:00:00"},
            ],
        })

        assert len(availability.intervals) == 1
        assert availability.intervals[0].start_time == ""
        assert availability.timezone == "UTC"

    def test_booking_defaults(self):
        booking = parse_booking({"id": 1})

        assert booking.status == "confirmed"
        assert booking.start_time is None
        assert booking.name == ""

    def test_booking_attendee(self):
        booking = parse_booking({"id": 1, "name": "Alice", "client_email": "alice@example.com"})

        assert booking.name == "Alice"
        assert booking.client_email == "alice@example.com"

    def test_event_type(self):
        event_type = parse_event_type({"id": 3, "slug": "s", "title": "Chat", "duration": "15"})

        assert event_type.duration == 15
        assert event_type.name == "Chat"
        assert event_type.availability_id is None

    def test_event_type_requires_id(self):
        with pytest.raises(BookingAPIError):
            parse_event_type({"slug": "s"})


class TestMockSchedulingClient:
    """Tests for the fixture-backed mock client."""

    def test_event_type_by_slug(self):
        event_type = asyncio.run(MockSchedulingClient().get_event_type_by_slug("60min"))

        assert event_type.duration == 60
        assert event_type.availability_id == 2

    def test_unknown_slug(self):
        with pytest.raises(NotFoundError):
            asyncio.run(MockSchedulingClient().get_event_type_by_slug("missing"))

    def test_default_availability(self):
        availability = asyncio.run(MockSchedulingClient().get_default_availability())

        assert availability.id == 1
        assert len(availability.intervals) == 5

    def test_bookings_filters(self):
        client = MockSchedulingClient()

        confirmed = asyncio.run(client.get_bookings(
            event_type_id=1, date="2026-11-02", booking_status="confirmed"
        ))
        everything = asyncio.run(client.get_bookings(event_type_id=1, date="2026-11-02"))

        assert [b.id for b in confirmed] == [1]
        assert [b.id for b in everything] == [1, 2]

    def test_create_booking_is_kept_in_memory(self):
        client = MockSchedulingClient()

        booking = asyncio.run(client.create_booking({
            "event_type_id": 1,
            "start_time": "2026-11-03T09:00:00Z",
            "end_time": "2026-11-03T09:30:00Z",
            "booking_status": "confirmed",
        }))
        found = asyncio.run(client.get_bookings(event_type_id=1, date="2026-11-03"))

        assert booking.id == 4
        assert [b.id for b in found] == [4]

    def test_update_availability_is_kept_in_memory(self):
        client = MockSchedulingClient()
        payload = {
            "name": "Mornings",
            "timezone": "UTC",
            "intervals": [{"day_of_week": 1, "start_time": "08:00:00", "end_time": "12:00:00"}],
        }

        asyncio.run(client.update_availability(1, payload))
        availability = asyncio.run(client.get_availability(1))

        assert availability.id == 1
        assert availability.name == "Mornings"
        assert len(availability.intervals) == 1

    def test_update_unknown_availability(self):
        with pytest.raises(NotFoundError):
            asyncio.run(MockSchedulingClient().update_availability(99, {"intervals": []}))

    def test_cancel_booking(self):
        client = MockSchedulingClient()

        booking = asyncio.run(client.cancel_booking(1))
        confirmed = asyncio.run(client.get_bookings(event_type_id=1, booking_status="confirmed"))

        assert booking.is_cancelled
        assert confirmed == []

    def test_missing_fixture_file(self, tmp_path):
        client = MockSchedulingClient(data_file=tmp_path / "absent.json")

        assert asyncio.run(client.get_default_availability()) is None
