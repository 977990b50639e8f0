# booking_api/repositories/__init__.py
"""
Repository layer: data access for every entity, no transaction control.
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .location_repository import LocationRepository
from .service_repository import ServiceRepository
from .user_repository import UserRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "IRepository",
    "LocationRepository",
    "RepositoryFactory",
    "ServiceRepository",
    "UserRepository",
]
