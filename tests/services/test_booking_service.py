"""Booking workflows: book, cancel, reschedule and the listings."""

from datetime import time, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from booking_api.core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ServiceException,
    SlotUnavailableException,
    TransientDatabaseException,
    ValidationException,
)
from booking_api.models import AvailabilitySlot, Booking
from booking_api.services.booking_service import BookingService


@pytest.fixture
def booking_service(db):
    return BookingService(db)


def _slot_available(db, slot_id: str) -> bool:
    db.expire_all()
    return db.get(AvailabilitySlot, slot_id).is_available


class TestBook:
    def test_book_confirms_and_takes_slot(self, booking_service, db, customer_principal, slot):
        confirmation = booking_service.book(customer_principal, slot.id)

        booking = confirmation.booking
        assert booking.status == "confirmed"
        assert booking.customer_id == customer_principal.user_id
        assert booking.service_id == slot.service_id
        assert booking.availability_id == slot.id
        assert booking.booking_date == slot.date
        assert confirmation.slot.start_time == time(9, 0)
        assert _slot_available(db, slot.id) is False

    def test_second_booking_of_same_slot_is_unavailable(
        self, booking_service, db, customer_principal, other_customer_principal, slot
    ):
        booking_service.book(customer_principal, slot.id)

        with pytest.raises(SlotUnavailableException) as exc_info:
            booking_service.book(other_customer_principal, slot.id)

        assert exc_info.value.message == "Slot is not available or does not exist"
        assert db.query(Booking).count() == 1

    def test_missing_availability_id(self, booking_service, customer_principal):
        with pytest.raises(ValidationException) as exc_info:
            booking_service.book(customer_principal, None)
        assert exc_info.value.message == "Availability ID is required"

    def test_unknown_slot_is_unavailable(self, booking_service, customer_principal):
        with pytest.raises(SlotUnavailableException):
            booking_service.book(customer_principal, "01J0000000000000000000000X")

    def test_failed_insert_rolls_back_slot(self, booking_service, db, customer_principal, slot):
        error = OperationalError(
            "INSERT INTO bookings", {}, Exception("server closed the connection")
        )
        with patch.object(booking_service.repository, "create", side_effect=error):
            with pytest.raises(TransientDatabaseException):
                booking_service.book(customer_principal, slot.id)

        assert _slot_available(db, slot.id) is True
        assert db.query(Booking).count() == 0

    def test_unexpected_failure_rolls_back_slot(
        self, booking_service, db, customer_principal, slot
    ):
        with patch.object(booking_service.repository, "create", side_effect=RuntimeError("bug")):
            with pytest.raises(RuntimeError):
                booking_service.book(customer_principal, slot.id)
        assert _slot_available(db, slot.id) is True


class TestCancel:
    def test_cancel_reopens_slot(
        self, booking_service, db, customer, customer_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot)

        cancelled = booking_service.cancel(customer_principal, booking.id)

        assert cancelled.id == booking.id
        assert cancelled.availability_id == slot.id
        assert cancelled.booking_date == slot.date
        assert db.query(Booking).count() == 0
        assert _slot_available(db, slot.id) is True
        assert slot.id in [row.id for row in booking_service.slot_ledger.list_available_slots()]

    def test_other_customer_gets_not_found(
        self, booking_service, db, customer, other_customer_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot)

        with pytest.raises(NotFoundException) as exc_info:
            booking_service.cancel(other_customer_principal, booking.id)

        assert exc_info.value.message == (
            "Booking not found or you do not have permission to cancel it"
        )
        assert _slot_available(db, slot.id) is False

    def test_unknown_booking_gets_same_not_found(self, booking_service, customer_principal):
        with pytest.raises(NotFoundException) as exc_info:
            booking_service.cancel(customer_principal, "01J0000000000000000000000X")
        assert exc_info.value.message == (
            "Booking not found or you do not have permission to cancel it"
        )

    def test_missing_booking_id(self, booking_service, customer_principal):
        with pytest.raises(ValidationException):
            booking_service.cancel(customer_principal, "")

    def test_past_booking_is_invalid_state(
        self, booking_service, db, customer, customer_principal, service, slot_factory,
        booking_factory, past_date,
    ):
        past_slot = slot_factory(service, past_date)
        booking = booking_factory(customer, past_slot)

        with pytest.raises(InvalidStateException) as exc_info:
            booking_service.cancel(customer_principal, booking.id)

        assert exc_info.value.message == "Cannot cancel past bookings"
        assert db.query(Booking).count() == 1
        assert _slot_available(db, past_slot.id) is False

    def test_booking_for_today_can_be_cancelled(
        self, db, customer, customer_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot)
        service = BookingService(db, today=lambda: slot.date)
        service.cancel(customer_principal, booking.id)
        assert db.query(Booking).count() == 0

    def test_legacy_booking_matched_by_service_and_date(
        self, booking_service, db, customer, customer_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot, link_slot=False)

        cancelled = booking_service.cancel(customer_principal, booking.id)

        assert cancelled.availability_id == slot.id
        assert _slot_available(db, slot.id) is True

    def test_missing_slot_is_tolerated(
        self, booking_service, db, customer, customer_principal, slot, booking_factory, caplog
    ):
        booking = booking_factory(customer, slot, link_slot=False)
        booking.booking_date = slot.date + timedelta(days=365)
        db.commit()

        with caplog.at_level("WARNING"):
            cancelled = booking_service.cancel(customer_principal, booking.id)

        assert cancelled.availability_id is None
        assert db.query(Booking).count() == 0
        assert "No slot found to release" in caplog.text


class TestReschedule:
    def test_reschedule_moves_booking(
        self, booking_service, db, customer, customer_principal, slot, later_slot, booking_factory
    ):
        booking = booking_factory(customer, slot)

        result = booking_service.reschedule(customer_principal, booking.id, later_slot.id)

        assert result.booking.id == booking.id
        assert result.booking.availability_id == later_slot.id
        assert result.booking.booking_date == later_slot.date
        assert result.old_availability_id == slot.id
        assert result.old_date == slot.date
        assert result.new_slot.id == later_slot.id
        assert _slot_available(db, slot.id) is True
        assert _slot_available(db, later_slot.id) is False

    def test_cross_service_reschedule_rejected(
        self, booking_service, db, customer, customer_principal, slot, other_service_slot,
        booking_factory,
    ):
        booking = booking_factory(customer, slot)

        with pytest.raises(ValidationException) as exc_info:
            booking_service.reschedule(customer_principal, booking.id, other_service_slot.id)

        assert exc_info.value.message == "New time slot must be for the same service"
        assert _slot_available(db, slot.id) is False
        assert _slot_available(db, other_service_slot.id) is True

    def test_unavailable_new_slot_leaves_everything_unchanged(
        self, booking_service, db, customer, other_customer, customer_principal, slot,
        later_slot, booking_factory,
    ):
        booking = booking_factory(customer, slot)
        booking_factory(other_customer, later_slot)

        with pytest.raises(SlotUnavailableException) as exc_info:
            booking_service.reschedule(customer_principal, booking.id, later_slot.id)

        assert exc_info.value.message == "New time slot is not available or does not exist"
        db.expire_all()
        assert db.get(Booking, booking.id).availability_id == slot.id
        assert _slot_available(db, slot.id) is False
        assert _slot_available(db, later_slot.id) is False

    def test_reschedule_to_own_slot_is_unavailable(
        self, booking_service, customer, customer_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot)
        with pytest.raises(SlotUnavailableException):
            booking_service.reschedule(customer_principal, booking.id, slot.id)

    def test_unknown_new_slot_is_unavailable(
        self, booking_service, customer, customer_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot)
        with pytest.raises(SlotUnavailableException):
            booking_service.reschedule(customer_principal, booking.id, "01J0000000000000000000000X")

    def test_other_customer_gets_not_found(
        self, booking_service, customer, other_customer_principal, slot, later_slot, booking_factory
    ):
        booking = booking_factory(customer, slot)
        with pytest.raises(NotFoundException) as exc_info:
            booking_service.reschedule(other_customer_principal, booking.id, later_slot.id)
        assert exc_info.value.message == (
            "Booking not found or you do not have permission to reschedule it"
        )

    def test_past_booking_rejected(
        self, booking_service, db, customer, customer_principal, service, slot_factory,
        booking_factory, past_date, later_slot,
    ):
        booking = booking_factory(customer, slot_factory(service, past_date))

        with pytest.raises(InvalidStateException) as exc_info:
            booking_service.reschedule(customer_principal, booking.id, later_slot.id)

        assert exc_info.value.message == "Cannot reschedule past bookings"
        assert _slot_available(db, later_slot.id) is True

    @pytest.mark.parametrize("booking_id, new_id", [(None, "x"), ("x", None), ("", "")])
    def test_missing_ids(self, booking_service, customer_principal, booking_id, new_id):
        with pytest.raises(ValidationException) as exc_info:
            booking_service.reschedule(customer_principal, booking_id, new_id)
        assert exc_info.value.message == "Booking ID and new availability ID are required"

    def test_failure_after_release_rolls_back_both_slots(
        self, booking_service, db, customer, customer_principal, slot, later_slot, booking_factory
    ):
        booking = booking_factory(customer, slot)
        ledger = booking_service.slot_ledger

        with patch.object(ledger, "reserve", side_effect=ServiceException("boom")):
            with pytest.raises(ServiceException):
                booking_service.reschedule(customer_principal, booking.id, later_slot.id)

        assert _slot_available(db, slot.id) is False
        assert _slot_available(db, later_slot.id) is True
        db.expire_all()
        assert db.get(Booking, booking.id).availability_id == slot.id


class TestListings:
    def test_customer_bookings_newest_first(
        self, booking_service, customer, other_customer, customer_principal, slot, later_slot,
        booking_factory,
    ):
        first = booking_factory(customer, slot)
        second = booking_factory(customer, later_slot)

        rows = booking_service.list_customer_bookings(customer_principal)

        assert [row.id for row in rows] == [second.id, first.id]
        assert rows[0].service_name == "Haircut"
        assert rows[0].provider_name == "Pat Provider"
        assert rows[0].start_time == time(14, 0)

    def test_customer_sees_only_own_bookings(
        self, booking_service, other_customer, customer_principal, slot, booking_factory
    ):
        booking_factory(other_customer, slot)
        assert booking_service.list_customer_bookings(customer_principal) == []

    def test_provider_appointments_include_customer_contact(
        self, booking_service, customer, provider_principal, slot, booking_factory
    ):
        booking = booking_factory(customer, slot)

        rows = booking_service.list_provider_appointments(provider_principal)

        assert [row.id for row in rows] == [booking.id]
        assert rows[0].customer_name == "Casey Customer"
        assert rows[0].customer_email == "casey@example.com"

    def test_customer_cannot_list_appointments(self, booking_service, customer_principal):
        with pytest.raises(ForbiddenException):
            booking_service.list_provider_appointments(customer_principal)


class TestLockOrder:
    def test_legacy_reschedule_locks_slots_in_ascending_order(
        self, booking_service, db, customer, customer_principal, slot, later_slot,
        booking_factory,
    ):
        booking = booking_factory(customer, slot, link_slot=False)
        repository = booking_service.slot_ledger.repository

        with patch.object(
            repository, "get_for_update", wraps=repository.get_for_update
        ) as get_for_update:
            booking_service.reschedule(customer_principal, booking.id, later_slot.id)

        first_two = [call.args[0] for call in get_for_update.call_args_list[:2]]
        assert first_two == sorted([slot.id, later_slot.id])
        assert _slot_available(db, slot.id) is True
        assert _slot_available(db, later_slot.id) is False
