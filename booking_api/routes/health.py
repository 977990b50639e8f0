# booking_api/routes/health.py
"""
Service metadata and health endpoints.

Endpoints:
    GET / - API name, version and endpoint groups
    GET /health - Liveness plus a database ping
    GET /tables - Tables present in the connected database
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, Request, Response, status

from ..api.dependencies import get_database
from ..core.constants import API_VERSION, APP_NAME
from ..database import Database
from ..schemas.meta import ApiInfoResponse, HealthResponse, TableListResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", response_model=ApiInfoResponse)
def api_info(request: Request) -> ApiInfoResponse:
    prefix = request.app.state.settings.api_prefix
    return ApiInfoResponse(
        message=f"{APP_NAME} is running",
        version=API_VERSION,
        endpoints={
            "auth": f"{prefix}/auth",
            "services": f"{prefix}/services",
            "availability": f"{prefix}/availability",
            "bookings": f"{prefix}/bookings",
            "health": "/health",
        },
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    response: Response, database: Database = Depends(get_database)
) -> HealthResponse:
    """
    Health check endpoint.

    Returns 503 with status "degraded" when the database cannot be reached.
    """
    connected = await asyncio.to_thread(database.ping)
    if not connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        success=connected,
        status="ok" if connected else "degraded",
        database="connected" if connected else "unavailable",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@router.get("/tables", response_model=TableListResponse)
async def list_tables(database: Database = Depends(get_database)) -> TableListResponse:
    tables = await asyncio.to_thread(database.list_tables)
    return TableListResponse(count=len(tables), tables=tables)
