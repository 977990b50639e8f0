# booking_api/api/dependencies/__init__.py
"""
FastAPI dependencies: database sessions, the access guard and services.
"""

from .auth import (
    get_current_principal,
    require_customer,
    require_roles,
)
from .database import get_database, get_db
from .services import (
    get_auth_service,
    get_booking_service,
    get_catalog_service,
    get_slot_ledger,
)

__all__ = [
    "get_auth_service",
    "get_booking_service",
    "get_catalog_service",
    "get_current_principal",
    "get_database",
    "get_db",
    "get_slot_ledger",
    "require_customer",
    "require_roles",
]
