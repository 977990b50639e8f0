# booking_api/core/enums.py
"""
Enumerations shared across models, schemas and services.
"""

from enum import Enum


class Role(str, Enum):
    """Closed set of user roles."""

    CUSTOMER = "customer"
    PROVIDER = "provider"


class BookingStatus(str, Enum):
    """Booking lifecycle; cancellation deletes the row."""

    CONFIRMED = "confirmed"
