# booking_api/services/catalog_service.py
"""
Catalog service: provider-owned services.
"""

from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.service import Service
from ..principal import UserPrincipal
from ..repositories.factory import RepositoryFactory
from .base import BaseService


class CatalogService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.location_repository = RepositoryFactory.create_location_repository(db)

    @BaseService.measure_operation("create_service")
    def create_service(
        self,
        principal: UserPrincipal,
        name: Optional[str],
        price: Optional[Decimal],
        description: Optional[str] = None,
        location_id: Optional[str] = None,
    ) -> Service:
        """
        Create a service owned by the calling provider.

        Raises:
            ForbiddenException: caller is not a provider
            ValidationException: name or price missing, or price negative
            NotFoundException: location_id does not exist
        """
        if not principal.is_provider:
            raise ForbiddenException("Only providers can create services", code="PROVIDER_ONLY")

        name = (name or "").strip()
        if not name or price is None:
            raise ValidationException(
                "Service name and price are required", code="MISSING_FIELDS"
            )
        if price < 0:
            raise ValidationException("Price must be a non-negative number", code="INVALID_PRICE")
        if location_id and self.location_repository.get_by_id(location_id) is None:
            raise NotFoundException("Location not found", code="LOCATION_NOT_FOUND")

        self.log_operation(
            "create_service", provider_id=principal.user_id, service_name=name
        )
        with self.transaction():
            service = self.service_repository.create(
                provider_id=principal.user_id,
                name=name,
                price=price,
                description=description or "",
                location_id=location_id or None,
            )
        return service

    @BaseService.measure_operation("list_services")
    def list_services(self) -> List[Any]:
        """Every service with provider and location names; open to anyone."""
        return self.read("list_services", self.service_repository.list_with_details)

    @BaseService.measure_operation("list_provider_services")
    def list_provider_services(self, principal: UserPrincipal) -> List[Any]:
        if not principal.is_provider:
            raise ForbiddenException(
                "Only providers can view their services", code="PROVIDER_ONLY"
            )
        return self.read(
            "list_provider_services",
            lambda: self.service_repository.list_for_provider(principal.user_id),
        )
