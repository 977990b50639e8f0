# booking_api/repositories/service_repository.py
"""
Catalog queries: services joined with their provider and location names.
"""

from typing import Any, List, Optional

from sqlalchemy.orm import Query, Session, aliased

from ..models.location import Location
from ..models.service import Service
from ..models.user import User
from .base_repository import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, db: Session):
        super().__init__(db, Service)

    def _listing_query(self) -> Query:
        provider = aliased(User)
        return (
            self.db.query(
                Service.id.label("id"),
                Service.provider_id.label("provider_id"),
                Service.location_id.label("location_id"),
                Service.name.label("name"),
                Service.description.label("description"),
                Service.price.label("price"),
                Service.created_at.label("created_at"),
                provider.name.label("provider_name"),
                Location.name.label("location_name"),
            )
            .outerjoin(provider, provider.id == Service.provider_id)
            .outerjoin(Location, Location.id == Service.location_id)
        )

    def list_with_details(self) -> List[Any]:
        """All services with provider_name and location_name, ordered by name."""
        query = self._listing_query().order_by(Service.name, Service.id)
        return self._execute_query(query, "service listing")

    def list_for_provider(self, provider_id: str) -> List[Any]:
        query = (
            self._listing_query()
            .filter(Service.provider_id == provider_id)
            .order_by(Service.name, Service.id)
        )
        return self._execute_query(query, "provider service listing")

    def get_owned(self, service_id: str, provider_id: str) -> Optional[Service]:
        return self.find_one_by(id=service_id, provider_id=provider_id)
