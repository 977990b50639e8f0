# booking_api/routes/availability.py
"""
Availability routes for providers.

Endpoints:
    POST / - Publish a slot for an owned service
    GET /provider - The caller's slots with service name and price
"""

import asyncio

from fastapi import APIRouter, Body, Depends, status

from ..api.dependencies import get_current_principal, get_slot_ledger
from ..principal import UserPrincipal
from ..schemas.availability import (
    ProviderSlot,
    ProviderSlotListResponse,
    SlotCreate,
    SlotOut,
    SlotResponse,
)
from ..services.slot_ledger import SlotLedger

router = APIRouter(tags=["availability"])


@router.post("", response_model=SlotResponse, status_code=status.HTTP_201_CREATED)
async def publish_slot(
    payload: SlotCreate = Body(...),
    principal: UserPrincipal = Depends(get_current_principal),
    slot_ledger: SlotLedger = Depends(get_slot_ledger),
) -> SlotResponse:
    slot = await asyncio.to_thread(
        slot_ledger.publish_slot,
        principal,
        service_id=payload.service_id,
        slot_date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        is_available=payload.is_available,
    )
    return SlotResponse(
        message="Availability created successfully",
        availability=SlotOut.model_validate(slot),
    )


@router.get("/provider", response_model=ProviderSlotListResponse)
async def list_provider_slots(
    principal: UserPrincipal = Depends(get_current_principal),
    slot_ledger: SlotLedger = Depends(get_slot_ledger),
) -> ProviderSlotListResponse:
    rows = await asyncio.to_thread(slot_ledger.list_provider_slots, principal)
    slots = [ProviderSlot.model_validate(row) for row in rows]
    return ProviderSlotListResponse(count=len(slots), availability=slots)
