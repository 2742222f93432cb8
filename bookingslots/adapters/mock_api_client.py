"""
Mock scheduling API client for trying the tool without a running backend.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import NotFoundError
from ..domain.models import AvailabilitySet, Booking, BookingStatus, EventType
from .api_client import parse_availability, parse_booking, parse_event_type


class MockSchedulingClient:
    """
    Mock client that serves records from a JSON fixture.

    The fixture holds ``event_types``, ``availabilities``, ``bookings`` and a
    ``default_availability_id``. Created and edited records are kept in
    memory only.
    """

    def __init__(self, data_file: Path | None = None):
        """
        Initialize the mock client.

        Args:
            data_file: Optional fixture path. Defaults to the bundled mock_api_data.json
        """
        self.data_file = data_file or Path(__file__).parent / "mock_api_data.json"
        self._load_data()

    def _load_data(self):
        """Load mock records from the JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            data = {}

        self.event_types: List[Dict[str, Any]] = data.get("event_types", [])
        self.availabilities: List[Dict[str, Any]] = data.get("availabilities", [])
        self.bookings: List[Dict[str, Any]] = data.get("bookings", [])
        self.default_availability_id = data.get("default_availability_id")

    async def get_availability(self, availability_id: int | str) -> AvailabilitySet:
        for record in self.availabilities:
            if str(record.get("id")) == str(availability_id):
                return parse_availability(record)
        raise NotFoundError(f"Availability not found: {availability_id}")

    async def get_default_availability(self) -> AvailabilitySet | None:
        if self.default_availability_id is None:
            return None
        try:
            return await self.get_availability(self.default_availability_id)
        except NotFoundError:
            return None

    async def get_bookings(
        self,
        *,
        event_type_id: int | str | None = None,
        date: str | None = None,
        booking_status: str | None = None,
        client_email: str | None = None
    ) -> List[Booking]:
        matches: List[Booking] = []

        for record in self.bookings:
            if event_type_id is not None and str(record.get("event_type_id")) != str(event_type_id):
                continue
            if date and _booking_date(record) != date:
                continue
            status = record.get("booking_status") or record.get("status") or "confirmed"
            if booking_status and status != booking_status:
                continue
            if client_email and record.get("client_email") != client_email:
                continue
            matches.append(parse_booking(record))

        return matches

    async def get_event_type(self, event_type_id: int | str) -> EventType:
        for record in self.event_types:
            if str(record.get("id")) == str(event_type_id):
                return parse_event_type(record)
        raise NotFoundError(f"Event type not found: {event_type_id}")

    async def get_event_type_by_slug(self, slug: str) -> EventType:
        for record in self.event_types:
            if record.get("slug") == slug:
                return parse_event_type(record)
        raise NotFoundError(f"Event type not found: {slug}")

    async def create_booking(self, payload: Dict[str, Any]) -> Booking:
        record = dict(payload)
        record["id"] = _next_id(self.bookings)
        self.bookings.append(record)
        return parse_booking(record)

    async def create_availability(self, payload: Dict[str, Any]) -> AvailabilitySet:
        record = dict(payload)
        record["id"] = _next_id(self.availabilities)
        self.availabilities.append(record)
        return parse_availability(record)

    async def update_availability(self, availability_id: int | str, payload: Dict[str, Any]) -> AvailabilitySet:
        for record in self.availabilities:
            if str(record.get("id")) == str(availability_id):
                record.update({key: value for key, value in payload.items() if key != "id"})
                return parse_availability(record)
        raise NotFoundError(f"Availability not found: {availability_id}")

    async def cancel_booking(self, booking_id: int | str) -> Booking:
        for record in self.bookings:
            if str(record.get("id")) == str(booking_id):
                record["booking_status"] = BookingStatus.CANCELLED.value
                return parse_booking(record)
        raise NotFoundError(f"Booking not found: {booking_id}")


def _booking_date(record: Dict[str, Any]) -> str:
    if record.get("date"):
        return str(record["date"])
    return str(record.get("start_time") or "")[:10]


def _next_id(records: List[Dict[str, Any]]) -> int:
    return max((int(r.get("id") or 0) for r in records), default=0) + 1
