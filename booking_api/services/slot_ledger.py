# booking_api/services/slot_ledger.py
"""
Slot ledger: owns the availability slot lifecycle.

Publishing and listing are standalone operations. ``reserve``, ``release``
and ``lock_slots`` never commit; they run inside the transaction of the
caller (the booking service) so that flipping a slot and writing the
booking land together or not at all.
"""

from datetime import date, time
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    SlotUnavailableException,
    ValidationException,
)
from ..models.availability import AvailabilitySlot
from ..models.booking import Booking
from ..principal import UserPrincipal
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class SlotLedger(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_availability_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)

    @BaseService.measure_operation("publish_slot")
    def publish_slot(
        self,
        principal: UserPrincipal,
        service_id: Optional[str],
        slot_date: Optional[date],
        start_time: Optional[time],
        end_time: Optional[time],
        is_available: bool = True,
    ) -> AvailabilitySlot:
        """
        Publish a slot for a service the caller owns.

        Raises:
            ForbiddenException: caller is not a provider
            ValidationException: a field is missing or the times are inverted
            NotFoundException: service missing or owned by someone else
        """
        if not principal.is_provider:
            raise ForbiddenException(
                "Only providers can set availability", code="PROVIDER_ONLY"
            )
        if not service_id or slot_date is None or start_time is None or end_time is None:
            raise ValidationException(
                "Service ID, date, start time, and end time are required",
                code="MISSING_FIELDS",
            )
        if end_time <= start_time:
            raise ValidationException(
                "End time must be after start time", code="INVALID_TIME_RANGE"
            )

        if self.service_repository.get_owned(service_id, principal.user_id) is None:
            raise NotFoundException(
                "Service not found or you do not own this service", code="SERVICE_NOT_FOUND"
            )

        self.log_operation(
            "publish_slot",
            provider_id=principal.user_id,
            service_id=service_id,
            date=str(slot_date),
        )
        with self.transaction():
            slot = self.repository.create(
                service_id=service_id,
                provider_id=principal.user_id,
                date=slot_date,
                start_time=start_time,
                end_time=end_time,
                is_available=is_available,
            )
        return slot

    @BaseService.measure_operation("list_provider_slots")
    def list_provider_slots(self, principal: UserPrincipal) -> List[Any]:
        if not principal.is_provider:
            raise ForbiddenException(
                "Only providers can view their availability", code="PROVIDER_ONLY"
            )
        return self.read(
            "list_provider_slots",
            lambda: self.repository.list_for_provider(principal.user_id),
        )

    @BaseService.measure_operation("list_available_slots")
    def list_available_slots(
        self, service_id: Optional[str] = None, on_date: Optional[date] = None
    ) -> List[Any]:
        """Public discovery listing of open slots."""
        return self.read(
            "list_available_slots",
            lambda: self.repository.list_open(service_id=service_id, on_date=on_date),
        )

    # Transaction participants

    def reserve(self, slot_id: str) -> AvailabilitySlot:
        """
        Lock the slot, re-check availability under the lock and mark it taken.

        Must run inside the caller's transaction.

        Raises:
            SlotUnavailableException: slot missing or already taken
        """
        slot = self.repository.get_for_update(slot_id)
        if slot is None or not slot.is_available:
            raise SlotUnavailableException(slot_id=slot_id)
        if not self.repository.claim(slot_id):
            self.logger.info(f"Slot {slot_id} was claimed concurrently")
            raise SlotUnavailableException(slot_id=slot_id)
        return slot

    def release(self, slot_id: str) -> bool:
        """
        Lock the slot and mark it available. Idempotent.

        Must run inside the caller's transaction. Returns False if the slot
        does not exist.
        """
        if self.repository.get_for_update(slot_id) is None:
            return False
        return self.repository.free(slot_id)

    def lock_slots(self, slot_ids: Iterable[Optional[str]]) -> Dict[str, AvailabilitySlot]:
        """Lock several slots in ascending id order. Must run inside a transaction."""
        return self.repository.lock_many(slot_id for slot_id in slot_ids if slot_id)

    def locate_for_booking(self, booking: Booking) -> Optional[str]:
        """
        Slot id backing a booking.

        Bookings without a slot reference are matched by (service, date). No
        lock is taken here; ``release`` and ``lock_slots`` lock the id.
        """
        if booking.availability_id:
            return str(booking.availability_id)
        return self.repository.find_id_by_service_and_date(
            booking.service_id, booking.booking_date
        )
