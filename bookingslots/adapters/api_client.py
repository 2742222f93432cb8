"""
Client for the scheduling REST API (event types, availability, bookings).
"""

import asyncio
import logging
from typing import Any, Dict, List

import requests

from ..domain.exceptions import BookingAPIError, NotFoundError
from ..domain.models import AvailabilitySet, Booking, BookingStatus, EventType, WeeklyInterval

logger = logging.getLogger(__name__)


class SchedulingAPIClient:
    """
    Client for the scheduling REST API.

    Blocking ``requests`` calls run in a worker thread so several lookups
    can be awaited concurrently.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        session: requests.Session | None = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. ``http://localhost:3001``
            timeout: Per-request timeout in seconds
            session: Optional session to reuse connections
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json"
        }

    async def get_availability(self, availability_id: int | str) -> AvailabilitySet:
        """
        Fetch one availability set.

        Raises:
            NotFoundError: If the availability does not exist
            BookingAPIError: If the call fails
        """
        data = await self._request("GET", f"/availability/{availability_id}")
        return parse_availability(data)

    async def get_default_availability(self) -> AvailabilitySet | None:
        """Fetch the designated default availability set, or None if there is none."""
        try:
            data = await self._request("GET", "/availability/default")
        except NotFoundError:
            return None

        if not data:
            return None
        return parse_availability(data)

    async def get_bookings(
        self,
        *,
        event_type_id: int | str | None = None,
        date: str | None = None,
        booking_status: str | None = None,
        client_email: str | None = None
    ) -> List[Booking]:
        """Fetch bookings matching the given filters. ``date`` is ``YYYY-MM-DD``."""
        filters = {
            "event_type_id": event_type_id,
            "date": date,
            "booking_status": booking_status,
            "client_email": client_email,
        }
        params = {key: value for key, value in filters.items() if value is not None}

        data = await self._request("GET", "/bookings", params=params)
        if not isinstance(data, list):
            raise BookingAPIError("Unexpected bookings payload: expected a list")

        return [parse_booking(item) for item in data if isinstance(item, dict)]

    async def get_event_type(self, event_type_id: int | str) -> EventType:
        """Fetch an event type by id."""
        data = await self._request("GET", f"/event-type/{event_type_id}")
        return parse_event_type(data)

    async def get_event_type_by_slug(self, slug: str) -> EventType:
        """Fetch an event type by its public slug."""
        data = await self._request("GET", f"/event-type/slug/{slug}")
        return parse_event_type(data)

    async def create_booking(self, payload: Dict[str, Any]) -> Booking:
        """Create a booking from an API payload and return the stored record."""
        data = await self._request("POST", "/bookings", json=payload)
        return parse_booking(data)

    async def create_availability(self, payload: Dict[str, Any]) -> AvailabilitySet:
        """Create an availability set (``name``, ``timezone``, ``intervals``)."""
        data = await self._request("POST", "/availability", json=payload)
        return parse_availability(data)

    async def update_availability(self, availability_id: int | str, payload: Dict[str, Any]) -> AvailabilitySet:
        """Replace the name, time zone and intervals of an availability set."""
        data = await self._request("PUT", f"/availability/{availability_id}", json=payload)
        return parse_availability(data)

    async def cancel_booking(self, booking_id: int | str) -> Booking:
        """Mark a booking as cancelled and return the updated record."""
        data = await self._request(
            "PUT",
            f"/bookings/{booking_id}",
            json={"booking_status": BookingStatus.CANCELLED.value}
        )
        return parse_booking(data)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        return await asyncio.to_thread(self._send, method, path, **kwargs)

    def _send(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None
    ) -> Any:
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                params=params,
                json=json,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise BookingAPIError(f"{method} {url} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Not found: {method} {url}")

        if not response.ok:
            raise BookingAPIError(
                f"{method} {url} failed with status {response.status_code}: "
                f"{_error_message(response)}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise BookingAPIError(f"Invalid JSON in response from {url}") from e

        return unwrap(body)


def unwrap(body: Any) -> Any:
    """Return the payload of a ``{"data": ...}`` envelope, or the body itself."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or ""
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason or ""


def parse_availability(data: Any) -> AvailabilitySet:
    """
    Parse an availability payload into the domain model.

    Interval times are kept verbatim; intervals without a usable day number
    are dropped with a warning.
    """
    if not isinstance(data, dict):
        raise BookingAPIError("Unexpected availability payload: expected an object")

    intervals: List[WeeklyInterval] = []
    for item in data.get("intervals") or []:
        try:
            day = int(item["day_of_week"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Could not parse availability interval %s: %s", item, e)
            continue

        intervals.append(WeeklyInterval(
            day_of_week=day,
            start_time=_as_text(item.get("start_time")),
            end_time=_as_text(item.get("end_time")),
        ))

    return AvailabilitySet(
        id=data.get("id"),
        name=data.get("name") or "",
        timezone=data.get("timezone") or "UTC",
        intervals=intervals,
    )


def parse_booking(data: Any) -> Booking:
    """Parse a booking payload. Either ``booking_status`` or ``status`` is accepted."""
    if not isinstance(data, dict):
        raise BookingAPIError("Unexpected booking payload: expected an object")

    status = data.get("booking_status") or data.get("status") or BookingStatus.CONFIRMED.value

    return Booking(
        id=data.get("id"),
        event_type_id=data.get("event_type_id"),
        start_time=_as_text(data.get("start_time")) or None,
        end_time=_as_text(data.get("end_time")) or None,
        status=str(status).lower(),
        name=_as_text(data.get("name")),
        client_email=_as_text(data.get("client_email")),
    )


def parse_event_type(data: Any) -> EventType:
    """Parse an event type payload."""
    if not isinstance(data, dict) or "id" not in data:
        raise BookingAPIError("Unexpected event type payload: expected an object with an id")

    try:
        duration = int(data["duration"]) if data.get("duration") is not None else None
    except (TypeError, ValueError):
        duration = None

    return EventType(
        id=data["id"],
        slug=data.get("slug") or "",
        name=data.get("name") or data.get("title") or "",
        duration=duration,
        availability_id=data.get("availability_id"),
    )


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)
