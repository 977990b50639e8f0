# booking_api/models/__init__.py
"""
Database models.

Importing this package registers every table on ``Base.metadata``.
"""

from .availability import AvailabilitySlot
from .booking import Booking
from .location import Location
from .service import Service
from .user import User

__all__ = [
    "AvailabilitySlot",
    "Booking",
    "Location",
    "Service",
    "User",
]
