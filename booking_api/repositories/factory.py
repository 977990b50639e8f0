# booking_api/repositories/factory.py
"""
Repository factory.

Centralizes repository creation so services receive repositories bound to
the same session they run their transaction on.
"""

from sqlalchemy.orm import Session

from .availability_repository import AvailabilityRepository
from .booking_repository import BookingRepository
from .location_repository import LocationRepository
from .service_repository import ServiceRepository
from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> UserRepository:
        return UserRepository(db)

    @staticmethod
    def create_service_repository(db: Session) -> ServiceRepository:
        return ServiceRepository(db)

    @staticmethod
    def create_location_repository(db: Session) -> LocationRepository:
        return LocationRepository(db)

    @staticmethod
    def create_availability_repository(db: Session) -> AvailabilityRepository:
        """Create repository for slot queries and slot row locking."""
        return AvailabilityRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> BookingRepository:
        """Create repository for booking locking and listings."""
        return BookingRepository(db)
