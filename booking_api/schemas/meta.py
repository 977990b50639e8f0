# booking_api/schemas/meta.py
from typing import Dict, List, Literal

from .base import SuccessResponse


class ApiInfoResponse(SuccessResponse):
    message: str
    version: str
    endpoints: Dict[str, str]


class HealthResponse(SuccessResponse):
    status: Literal["ok", "degraded"]
    database: Literal["connected", "unavailable"]
    timestamp: str


class TableListResponse(SuccessResponse):
    count: int
    tables: List[str]
