# booking_api/routes/bookings.py
"""
Booking routes.

Endpoints:
    GET /available - Open slots, filterable by service and date (public)
    POST / - Book a slot (customer)
    GET /my-bookings - The caller's bookings
    GET /provider-appointments - Bookings on the caller's services (provider)
    DELETE /cancel - Cancel one of the caller's bookings
    PUT /reschedule - Move one of the caller's bookings to another slot
"""

import asyncio
from datetime import date
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ..api.dependencies import (
    get_booking_service,
    get_current_principal,
    get_slot_ledger,
    require_customer,
)
from ..principal import UserPrincipal
from ..schemas.availability import OpenSlot, OpenSlotListResponse
from ..schemas.booking import (
    Appointment,
    AppointmentListResponse,
    BookingCancel,
    BookingCancelResponse,
    BookingCreate,
    BookingCreateResponse,
    BookingOut,
    BookingReschedule,
    CancelledBookingOut,
    CustomerBooking,
    CustomerBookingListResponse,
    NewSlot,
    OldSlot,
    RescheduleResponse,
    SlotSummary,
)
from ..services.booking_service import BookingService
from ..services.slot_ledger import SlotLedger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


@router.get("/available", response_model=OpenSlotListResponse)
async def list_available_slots(
    service_id: Optional[str] = Query(None, description="Only slots of this service"),
    on_date: Optional[date] = Query(None, alias="date", description="Only slots on this date"),
    slot_ledger: SlotLedger = Depends(get_slot_ledger),
) -> OpenSlotListResponse:
    rows = await asyncio.to_thread(
        slot_ledger.list_available_slots, service_id=service_id, on_date=on_date
    )
    slots = [OpenSlot.model_validate(row) for row in rows]
    return OpenSlotListResponse(count=len(slots), slots=slots)


@router.post("", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate = Body(...),
    principal: UserPrincipal = Depends(require_customer),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingCreateResponse:
    confirmation = await asyncio.to_thread(
        booking_service.book, principal, payload.availability_id
    )
    return BookingCreateResponse(
        message="Booking confirmed successfully",
        booking=BookingOut.model_validate(confirmation.booking),
        slot=SlotSummary.model_validate(confirmation.slot),
    )


@router.get("/my-bookings", response_model=CustomerBookingListResponse)
async def list_my_bookings(
    principal: UserPrincipal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> CustomerBookingListResponse:
    rows = await asyncio.to_thread(booking_service.list_customer_bookings, principal)
    bookings = [CustomerBooking.model_validate(row) for row in rows]
    return CustomerBookingListResponse(count=len(bookings), bookings=bookings)


@router.get("/provider-appointments", response_model=AppointmentListResponse)
async def list_provider_appointments(
    principal: UserPrincipal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> AppointmentListResponse:
    rows = await asyncio.to_thread(booking_service.list_provider_appointments, principal)
    appointments = [Appointment.model_validate(row) for row in rows]
    return AppointmentListResponse(count=len(appointments), appointments=appointments)


@router.delete("/cancel", response_model=BookingCancelResponse)
async def cancel_booking(
    payload: BookingCancel = Body(...),
    principal: UserPrincipal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingCancelResponse:
    cancelled = await asyncio.to_thread(booking_service.cancel, principal, payload.booking_id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        cancelled_booking=CancelledBookingOut.model_validate(cancelled),
    )


@router.put("/reschedule", response_model=RescheduleResponse)
async def reschedule_booking(
    payload: BookingReschedule = Body(...),
    principal: UserPrincipal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> RescheduleResponse:
    result = await asyncio.to_thread(
        booking_service.reschedule,
        principal,
        payload.booking_id,
        payload.new_availability_id,
    )
    new_slot = result.new_slot
    return RescheduleResponse(
        message="Booking rescheduled successfully",
        booking=BookingOut.model_validate(result.booking),
        old_slot=OldSlot(availability_id=result.old_availability_id, date=result.old_date),
        new_slot=NewSlot(
            availability_id=new_slot.id,
            date=new_slot.date,
            start_time=new_slot.start_time,
            end_time=new_slot.end_time,
        ),
    )
