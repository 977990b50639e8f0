# booking_api/services/__init__.py
"""
Service layer: business rules and transaction boundaries.
"""

from .auth_service import AuthService
from .base import BaseService
from .booking_service import BookingService
from .catalog_service import CatalogService
from .slot_ledger import SlotLedger

__all__ = [
    "AuthService",
    "BaseService",
    "BookingService",
    "CatalogService",
    "SlotLedger",
]
