# booking_api/services/booking_service.py
"""
Booking service: book, cancel and reschedule on top of the slot ledger.

Each write runs in one transaction. Row locks are always taken booking
first, then slots (ascending id when two slots are involved), at every
call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Any, Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.enums import BookingStatus
from ..core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    SlotUnavailableException,
    ValidationException,
)
from ..core.timezone_utils import get_today
from ..models.availability import AvailabilitySlot
from ..models.booking import Booking
from ..principal import UserPrincipal
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .slot_ledger import SlotLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingConfirmation:
    booking: Booking
    slot: AvailabilitySlot


@dataclass(frozen=True)
class CancelledBooking:
    """Snapshot of a booking taken just before its row was deleted."""

    id: str
    service_id: str
    availability_id: Optional[str]
    booking_date: date


@dataclass(frozen=True)
class RescheduleResult:
    booking: Booking
    old_availability_id: Optional[str]
    old_date: date
    new_slot: AvailabilitySlot


class BookingService(BaseService):
    """
    Orchestrates booking workflows.

    State per booking: active, then either cancelled (row deleted) or
    rescheduled (same row, new slot and date).
    """

    def __init__(
        self,
        db: Session,
        slot_ledger: Optional[SlotLedger] = None,
        repository: Optional[BookingRepository] = None,
        today: Callable[[], date] = get_today,
    ):
        super().__init__(db)
        self.slot_ledger = slot_ledger or SlotLedger(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self._today = today

    @BaseService.measure_operation("book")
    def book(self, principal: UserPrincipal, availability_id: Optional[str]) -> BookingConfirmation:
        """
        Reserve a slot and record a confirmed booking for it.

        Of several concurrent calls for one slot exactly one succeeds; the
        others get SlotUnavailableException and leave nothing behind.
        """
        if not availability_id:
            raise ValidationException("Availability ID is required", code="MISSING_FIELDS")

        self.log_operation("book", customer_id=principal.user_id, availability_id=availability_id)
        with self.transaction():
            slot = self.slot_ledger.reserve(availability_id)
            try:
                booking = self.repository.create(
                    customer_id=principal.user_id,
                    service_id=slot.service_id,
                    availability_id=slot.id,
                    booking_date=slot.date,
                    status=BookingStatus.CONFIRMED.value,
                )
            except IntegrityError as exc:
                # Another booking already references this slot
                raise SlotUnavailableException(slot_id=availability_id) from exc

        self.logger.info(f"Booking {booking.id} confirmed for slot {slot.id}")
        return BookingConfirmation(booking=booking, slot=slot)

    @BaseService.measure_operation("cancel")
    def cancel(self, principal: UserPrincipal, booking_id: Optional[str]) -> CancelledBooking:
        """
        Delete the caller's booking and reopen its slot.

        Raises:
            ValidationException: booking_id missing
            NotFoundException: no such booking for this customer
            InvalidStateException: booking date is before today
        """
        if not booking_id:
            raise ValidationException("Booking ID is required", code="MISSING_FIELDS")

        self.log_operation("cancel", customer_id=principal.user_id, booking_id=booking_id)
        with self.transaction():
            booking = self._lock_owned_booking(
                principal,
                booking_id,
                "Booking not found or you do not have permission to cancel it",
            )
            self._ensure_not_past(booking, "Cannot cancel past bookings")

            slot_id = self.slot_ledger.locate_for_booking(booking)
            self._release_previous_slot(booking, slot_id)

            cancelled = CancelledBooking(
                id=booking.id,
                service_id=booking.service_id,
                availability_id=slot_id,
                booking_date=booking.booking_date,
            )
            self.repository.delete(booking)

        self.logger.info(f"Booking {cancelled.id} cancelled")
        return cancelled

    @BaseService.measure_operation("reschedule")
    def reschedule(
        self,
        principal: UserPrincipal,
        booking_id: Optional[str],
        new_availability_id: Optional[str],
    ) -> RescheduleResult:
        """
        Move the caller's booking to another open slot of the same service.

        On success the old slot is open, the new slot is taken and the
        booking carries the new slot and date. Any failure leaves both
        slots and the booking untouched.
        """
        if not booking_id or not new_availability_id:
            raise ValidationException(
                "Booking ID and new availability ID are required", code="MISSING_FIELDS"
            )

        self.log_operation(
            "reschedule",
            customer_id=principal.user_id,
            booking_id=booking_id,
            new_availability_id=new_availability_id,
        )
        with self.transaction():
            booking = self._lock_owned_booking(
                principal,
                booking_id,
                "Booking not found or you do not have permission to reschedule it",
            )
            self._ensure_not_past(booking, "Cannot reschedule past bookings")

            old_slot_id = self.slot_ledger.locate_for_booking(booking)
            locked = self.slot_ledger.lock_slots([old_slot_id, new_availability_id])

            new_slot = locked.get(new_availability_id)
            if new_slot is None or not new_slot.is_available:
                raise SlotUnavailableException(
                    "New time slot is not available or does not exist",
                    slot_id=new_availability_id,
                )
            if new_slot.service_id != booking.service_id:
                raise ValidationException(
                    "New time slot must be for the same service", code="SERVICE_MISMATCH"
                )

            old_date = booking.booking_date
            self._release_previous_slot(booking, old_slot_id)
            self.slot_ledger.reserve(new_slot.id)

            booking.availability_id = new_slot.id
            booking.booking_date = new_slot.date
            self.repository.flush()

        self.logger.info(
            f"Booking {booking.id} rescheduled from slot {old_slot_id} to {new_slot.id}"
        )
        return RescheduleResult(
            booking=booking,
            old_availability_id=old_slot_id,
            old_date=old_date,
            new_slot=new_slot,
        )

    @BaseService.measure_operation("list_customer_bookings")
    def list_customer_bookings(self, principal: UserPrincipal) -> List[Any]:
        return self.read(
            "list_customer_bookings",
            lambda: self.repository.list_for_customer(principal.user_id),
        )

    @BaseService.measure_operation("list_provider_appointments")
    def list_provider_appointments(self, principal: UserPrincipal) -> List[Any]:
        if not principal.is_provider:
            raise ForbiddenException(
                "Only providers can view appointments", code="PROVIDER_ONLY"
            )
        return self.read(
            "list_provider_appointments",
            lambda: self.repository.list_for_provider(principal.user_id),
        )

    def _lock_owned_booking(
        self, principal: UserPrincipal, booking_id: str, not_found_message: str
    ) -> Booking:
        # Absent and not-owned are deliberately indistinguishable
        booking = self.repository.lock_owned(booking_id, principal.user_id)
        if booking is None:
            raise NotFoundException(not_found_message, code="BOOKING_NOT_FOUND")
        return booking

    def _ensure_not_past(self, booking: Booking, message: str) -> None:
        if booking.booking_date < self._today():
            raise InvalidStateException(message, code="BOOKING_IN_PAST")

    def _release_previous_slot(self, booking: Booking, slot_id: Optional[str]) -> None:
        if slot_id is None or not self.slot_ledger.release(slot_id):
            self.logger.warning(
                f"No slot found to release for booking {booking.id} "
                f"(service {booking.service_id}, date {booking.booking_date})"
            )
