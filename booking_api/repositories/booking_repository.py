# booking_api/repositories/booking_repository.py
"""
BookingRepository: ownership-scoped locking and the customer/provider
booking listings.
"""

from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilitySlot
from ..models.booking import Booking
from ..models.service import Service
from ..models.user import User
from .base_repository import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def create(self, **kwargs: Any) -> Booking:
        """
        Insert a booking.

        IntegrityError is re-raised untouched: a UNIQUE violation on
        ``availability_id`` means another booking already holds the slot.
        """
        try:
            booking = Booking(**kwargs)
            self.db.add(booking)
            self.db.flush()
            return booking
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            self.logger.error("Error creating booking: %s", e)
            raise RepositoryException(f"Failed to create booking: {e}") from e

    def lock_owned(self, booking_id: str, customer_id: str) -> Optional[Booking]:
        """Lock the booking row if it exists and belongs to the customer."""
        try:
            query = self.db.query(Booking).filter(
                Booking.id == booking_id, Booking.customer_id == customer_id
            )
            return self._lockable(query).populate_existing().first()
        except SQLAlchemyError as e:
            self.logger.error("Error locking booking %s: %s", booking_id, e)
            raise RepositoryException(f"Failed to lock booking: {e}") from e

    def list_for_customer(self, customer_id: str) -> List[Any]:
        """Customer's bookings, newest date first, then newest created."""
        provider = aliased(User)
        query = (
            self.db.query(
                Booking.id.label("id"),
                Booking.booking_date.label("booking_date"),
                Booking.status.label("status"),
                Booking.created_at.label("created_at"),
                Booking.service_id.label("service_id"),
                Booking.availability_id.label("availability_id"),
                Service.name.label("service_name"),
                Service.description.label("description"),
                Service.price.label("price"),
                AvailabilitySlot.start_time.label("start_time"),
                AvailabilitySlot.end_time.label("end_time"),
                provider.name.label("provider_name"),
            )
            .join(Service, Service.id == Booking.service_id)
            .join(provider, provider.id == Service.provider_id)
            .outerjoin(AvailabilitySlot, AvailabilitySlot.id == Booking.availability_id)
            .filter(Booking.customer_id == customer_id)
            .order_by(Booking.booking_date.desc(), Booking.created_at.desc())
        )
        return self._execute_query(query, "customer booking listing")

    def list_for_provider(self, provider_id: str) -> List[Any]:
        """Bookings against a provider's services, with customer contact details."""
        customer = aliased(User)
        query = (
            self.db.query(
                Booking.id.label("id"),
                Booking.booking_date.label("booking_date"),
                Booking.status.label("status"),
                Booking.created_at.label("created_at"),
                Booking.service_id.label("service_id"),
                Booking.availability_id.label("availability_id"),
                Service.name.label("service_name"),
                Service.price.label("price"),
                AvailabilitySlot.start_time.label("start_time"),
                AvailabilitySlot.end_time.label("end_time"),
                customer.name.label("customer_name"),
                customer.email.label("customer_email"),
            )
            .join(Service, Service.id == Booking.service_id)
            .join(customer, customer.id == Booking.customer_id)
            .outerjoin(AvailabilitySlot, AvailabilitySlot.id == Booking.availability_id)
            .filter(Service.provider_id == provider_id)
            .order_by(
                Booking.booking_date.desc(),
                AvailabilitySlot.start_time.desc(),
                Booking.created_at.desc(),
            )
        )
        return self._execute_query(query, "provider appointment listing")
