# booking_api/schemas/service.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import MessageResponse, Money, RequestModel, StandardizedModel, SuccessResponse


class ServiceCreate(RequestModel):
    name: Optional[str] = Field(None, max_length=255)
    price: Optional[Money] = None
    description: Optional[str] = None
    location_id: Optional[str] = None


class ServiceOut(StandardizedModel):
    id: str
    provider_id: str
    location_id: Optional[str] = None
    name: str
    description: str = ""
    price: Money
    created_at: Optional[datetime] = None


class ServiceListItem(ServiceOut):
    provider_name: Optional[str] = None
    location_name: Optional[str] = None


class ServiceResponse(MessageResponse):
    service: ServiceOut


class ServiceListResponse(SuccessResponse):
    count: int
    services: List[ServiceListItem]
