"""
Bookable time-slot generation from weekly availability and existing bookings.
"""

__version__ = "0.1.0"
