# booking_api/services/base.py
"""
Base service for the booking API.

Provides the pieces every service shares:
- Transaction management with rollback on any failure
- Translation of database errors into domain exceptions
- Operation logging and timing
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    DomainException,
    RepositoryException,
    ServiceException,
    TransientDatabaseException,
    is_transient_db_error,
)
from ..database import with_db_retry

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
R = TypeVar("R")

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Services share one session per request. Methods that write open exactly
    one ``transaction()``; helpers that run inside someone else's transaction
    say so in their docstring and never commit.
    """

    # Class-level metrics storage
    _class_metrics: Dict[str, Dict[str, Dict[str, float]]] = {}

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Commits on success. On any failure every write made inside the block
        is rolled back before the error propagates:
            - domain exceptions are re-raised unchanged
            - lost connections and timeouts become TransientDatabaseException
            - other database errors become ServiceException
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except DomainException:
            self._safe_rollback()
            raise
        except (SQLAlchemyError, RepositoryException) as e:
            self._safe_rollback()
            self.logger.error(f"Transaction failed: {str(e)}")
            raise self._translate_db_error(e) from e
        except Exception as e:
            self._safe_rollback()
            self.logger.error(f"Unexpected error in transaction: {str(e)}")
            raise

    def read(self, operation: str, func: Callable[[], R]) -> R:
        """Run a read-only query, retrying transient disconnects."""
        try:
            return with_db_retry(operation, func)
        except (SQLAlchemyError, RepositoryException) as e:
            self.logger.error(f"Read {operation} failed: {str(e)}")
            raise self._translate_db_error(e) from e

    def _safe_rollback(self) -> None:
        """Roll back, logging (not raising) if the rollback itself fails."""
        try:
            self.db.rollback()
        except SQLAlchemyError as rollback_error:
            self.logger.error(f"Rollback failed: {str(rollback_error)}")

    @staticmethod
    def _translate_db_error(exc: Exception) -> ServiceException:
        root = exc.__cause__ if isinstance(exc, RepositoryException) else exc
        if isinstance(root, OperationalError) and is_transient_db_error(root):
            return TransientDatabaseException(
                "Database temporarily unavailable, please retry",
                code="DATABASE_UNAVAILABLE",
                error=str(root),
            )
        return ServiceException(
            "Database operation failed",
            code="DATABASE_ERROR",
            error=str(root or exc),
        )

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("book")
            def book(self, ...):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.time()
                success = False
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                finally:
                    elapsed = time.time() - start_time
                    self._record_metric(operation_name, elapsed, success)
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        metrics = BaseService._class_metrics.setdefault(self.__class__.__name__, {})
        data = metrics.setdefault(
            operation,
            {"count": 0, "total_time": 0.0, "success_count": 0, "failure_count": 0},
        )
        data["count"] += 1
        data["total_time"] += elapsed
        if success:
            data["success_count"] += 1
        else:
            data["failure_count"] += 1

    def get_metrics(self) -> Dict[str, Any]:
        """Per-operation call counts and average timings for this service class."""
        metrics = BaseService._class_metrics.get(self.__class__.__name__, {})
        return {
            operation: {
                "count": data["count"],
                "avg_time": data["total_time"] / data["count"],
                "success_count": data["success_count"],
                "failure_count": data["failure_count"],
            }
            for operation, data in metrics.items()
            if data["count"]
        }
