# booking_api/schemas/booking.py
"""
Booking request and response schemas.
"""

import datetime as dt
from typing import List, Optional

from pydantic import AliasChoices, Field

from ..core.enums import BookingStatus
from .base import MessageResponse, Money, RequestModel, StandardizedModel, SuccessResponse


class BookingCreate(RequestModel):
    availability_id: Optional[str] = None


class BookingCancel(RequestModel):
    booking_id: Optional[str] = None


class BookingReschedule(RequestModel):
    booking_id: Optional[str] = None
    new_availability_id: Optional[str] = None


class BookingOut(StandardizedModel):
    id: str
    customer_id: str
    service_id: str
    availability_id: Optional[str] = None
    booking_date: dt.date
    status: BookingStatus
    created_at: Optional[dt.datetime] = None


class SlotSummary(StandardizedModel):
    id: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time


class BookingCreateResponse(MessageResponse):
    booking: BookingOut
    slot: SlotSummary


class CustomerBooking(StandardizedModel):
    id: str
    booking_date: dt.date
    status: BookingStatus
    created_at: Optional[dt.datetime] = None
    service_id: str
    availability_id: Optional[str] = None
    service_name: str
    description: str = ""
    price: Money
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    provider_name: str


class CustomerBookingListResponse(SuccessResponse):
    count: int
    bookings: List[CustomerBooking]


class Appointment(StandardizedModel):
    id: str
    booking_date: dt.date
    status: BookingStatus
    created_at: Optional[dt.datetime] = None
    service_id: str
    availability_id: Optional[str] = None
    service_name: str
    price: Money
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    customer_name: str
    customer_email: str


class AppointmentListResponse(SuccessResponse):
    count: int
    appointments: List[Appointment]


class CancelledBookingOut(StandardizedModel):
    id: str
    service_id: str
    availability_id: Optional[str] = None
    date: dt.date = Field(validation_alias=AliasChoices("booking_date", "date"))


class BookingCancelResponse(MessageResponse):
    cancelled_booking: CancelledBookingOut


class OldSlot(StandardizedModel):
    availability_id: Optional[str] = None
    date: dt.date


class NewSlot(StandardizedModel):
    availability_id: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time


class RescheduleResponse(MessageResponse):
    booking: BookingOut
    old_slot: OldSlot
    new_slot: NewSlot
