# booking_api/repositories/base_repository.py
"""
Base repository for the booking API.

Repositories own query construction and row locking. They never commit:
the service layer decides transaction boundaries.
"""

from abc import ABC, abstractmethod
import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class IRepository(ABC, Generic[T]):
    """Core data access methods every repository provides."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity with this primary key, or None."""

    @abstractmethod
    def create(self, **kwargs: Any) -> T:
        """Add and flush a new entity; raises RepositoryException on failure."""

    @abstractmethod
    def delete(self, entity: T) -> None:
        """Delete an already-loaded entity."""


class BaseRepository(IRepository[T]):
    """
    Default CRUD implementation shared by the entity repositories.

    Attributes:
        db: SQLAlchemy session (managed by service layer)
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str) -> Optional[T]:
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            self.logger.error("Error getting %s by id %s: %s", self.model.__name__, id, e)
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {e}") from e

    def get_for_update(self, id: str) -> Optional[T]:
        """
        Load a row with ``SELECT ... FOR UPDATE`` so the lock is held until the
        surrounding transaction ends. ``populate_existing`` makes sure the
        identity map is refreshed with the locked row's current values.
        """
        try:
            query = self._lockable(self.db.query(self.model).filter(self.model.id == id))
            return query.populate_existing().first()
        except SQLAlchemyError as e:
            self.logger.error("Error locking %s %s: %s", self.model.__name__, id, e)
            raise RepositoryException(f"Failed to lock {self.model.__name__}: {e}") from e

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit. Transaction management is handled by the service layer.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
            return entity
        except SQLAlchemyError as e:
            self.logger.error("Error creating %s: %s", self.model.__name__, e)
            raise RepositoryException(f"Failed to create {self.model.__name__}: {e}") from e

    def delete(self, entity: T) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error("Error deleting %s: %s", self.model.__name__, e)
            raise RepositoryException(f"Failed to delete {self.model.__name__}: {e}") from e

    def flush(self) -> None:
        """Flush pending ORM changes."""
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to flush {self.model.__name__}: {e}") from e

    def find_one_by(self, **kwargs: Any) -> Optional[T]:
        try:
            return self.db.query(self.model).filter_by(**kwargs).first()
        except SQLAlchemyError as e:
            self.logger.error("Error finding one by criteria: %s", e)
            raise RepositoryException(f"Failed to find record: {e}") from e

    def _lockable(self, query: Query) -> Query:
        """Add FOR UPDATE; dialects without row locks (SQLite) render nothing."""
        return query.with_for_update()

    def _execute_query(self, query: Query, description: str) -> List[Any]:
        try:
            return query.all()
        except SQLAlchemyError as e:
            self.logger.error("Error executing %s: %s", description, e)
            raise RepositoryException(f"Failed to execute {description}: {e}") from e
