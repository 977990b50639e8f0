# booking_api/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.auth_service import AuthService
from ...services.booking_service import BookingService
from ...services.catalog_service import CatalogService
from ...services.slot_ledger import SlotLedger
from .database import get_db


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_slot_ledger(db: Session = Depends(get_db)) -> SlotLedger:
    return SlotLedger(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Booking service sharing its session with the slot ledger it drives."""
    return BookingService(db, slot_ledger=SlotLedger(db))
