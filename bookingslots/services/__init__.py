"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_manager import BookingManager, ManagementClientProtocol
from .slot_finder import SchedulingClientProtocol, SlotFinderService

__all__ = [
    "BookingManager",
    "ManagementClientProtocol",
    "SchedulingClientProtocol",
    "SlotFinderService",
]
