# booking_api/schemas/availability.py
import datetime as dt
from typing import List, Optional

from .base import MessageResponse, Money, RequestModel, StandardizedModel, SuccessResponse


class SlotCreate(RequestModel):
    service_id: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    is_available: bool = True


class SlotOut(StandardizedModel):
    id: str
    service_id: str
    provider_id: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    is_available: bool


class ProviderSlot(SlotOut):
    service_name: str
    price: Money


class OpenSlot(SlotOut):
    service_name: str
    description: str = ""
    price: Money
    provider_name: str


class SlotResponse(MessageResponse):
    availability: SlotOut


class ProviderSlotListResponse(SuccessResponse):
    count: int
    availability: List[ProviderSlot]


class OpenSlotListResponse(SuccessResponse):
    count: int
    slots: List[OpenSlot]
