# booking_api/routes/services.py
"""
Catalog routes.

Endpoints:
    GET / - All services (public)
    POST / - Create a service (provider)
    GET /provider - The caller's own services (provider)
"""

import asyncio

from fastapi import APIRouter, Body, Depends, status

from ..api.dependencies import get_catalog_service, get_current_principal
from ..principal import UserPrincipal
from ..schemas.service import (
    ServiceCreate,
    ServiceListItem,
    ServiceListResponse,
    ServiceOut,
    ServiceResponse,
)
from ..services.catalog_service import CatalogService

router = APIRouter(tags=["services"])


@router.get("", response_model=ServiceListResponse)
async def list_services(
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ServiceListResponse:
    rows = await asyncio.to_thread(catalog_service.list_services)
    services = [ServiceListItem.model_validate(row) for row in rows]
    return ServiceListResponse(count=len(services), services=services)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: ServiceCreate = Body(...),
    principal: UserPrincipal = Depends(get_current_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ServiceResponse:
    service = await asyncio.to_thread(
        catalog_service.create_service,
        principal,
        name=payload.name,
        price=payload.price,
        description=payload.description,
        location_id=payload.location_id,
    )
    return ServiceResponse(
        message="Service created successfully",
        service=ServiceOut.model_validate(service),
    )


@router.get("/provider", response_model=ServiceListResponse)
async def list_provider_services(
    principal: UserPrincipal = Depends(get_current_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ServiceListResponse:
    rows = await asyncio.to_thread(catalog_service.list_provider_services, principal)
    services = [ServiceListItem.model_validate(row) for row in rows]
    return ServiceListResponse(count=len(services), services=services)
