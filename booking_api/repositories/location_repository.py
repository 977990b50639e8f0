# booking_api/repositories/location_repository.py
from sqlalchemy.orm import Session

from ..models.location import Location
from .base_repository import BaseRepository


class LocationRepository(BaseRepository[Location]):
    def __init__(self, db: Session):
        super().__init__(db, Location)
