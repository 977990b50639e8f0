# booking_api/core/exceptions.py
"""
Domain-specific exceptions for the booking API.

Services raise these; the API layer turns them into the JSON error
envelope via ``to_http_exception`` and the handlers in ``booking_api.errors``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        # Internal detail; only surfaced when error details are exposed.
        self.error = error
        super().__init__(self.message)

    def headers(self) -> Optional[Dict[str, str]]:
        return None

    def to_http_exception(self) -> HTTPException:
        detail: Dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }
        if self.error:
            detail["error"] = self.error
        return HTTPException(
            status_code=self.status_code,
            detail=detail,
            headers=self.headers(),
        )


class ValidationException(DomainException):
    """Raised when input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(DomainException):
    """Raised when no usable credentials were supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class ForbiddenException(DomainException):
    """Raised when credentials are invalid or lack the required role."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    """Raised when a resource is absent or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when data clashes with an existing record (e.g. duplicate email)."""

    status_code = status.HTTP_400_BAD_REQUEST


class SlotUnavailableException(DomainException):
    """Raised when a slot cannot be reserved."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        slot_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=message or "Slot is not available or does not exist",
            code="SLOT_UNAVAILABLE",
            details={"availability_id": slot_id} if slot_id else {},
        )


class InvalidStateException(DomainException):
    """Raised when an entity is in a state that forbids the operation."""

    status_code = status.HTTP_400_BAD_REQUEST


class ServiceException(DomainException):
    """Raised when a service operation fails unexpectedly."""

    def to_http_exception(self) -> HTTPException:
        if not self.message:
            self.message = "An error occurred processing your request"
        return super().to_http_exception()


class TransientDatabaseException(ServiceException):
    """Raised when the database connection was lost or timed out; safe to retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retry_after_seconds = 5

    def headers(self) -> Optional[Dict[str, str]]:
        return {"Retry-After": str(self.retry_after_seconds)}


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as query failures or
    constraint violations.
    """


def is_transient_db_error(exc: Exception) -> bool:
    """
    Check if an exception indicates a lost connection, timeout or pool exhaustion.
    """
    error_str = str(exc).lower()
    return any(
        marker in error_str
        for marker in (
            "queuepool",
            "timeout",
            "timed out",
            "connection",
            "server closed",
            "database is locked",
            "deadlock",
        )
    )
