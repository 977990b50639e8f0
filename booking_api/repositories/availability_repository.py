# booking_api/repositories/availability_repository.py
"""
AvailabilityRepository: slot queries and the row-level operations the
slot ledger builds on.

Locks are always taken in ascending slot id order so that two transactions
touching the same pair of slots cannot deadlock.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilitySlot
from ..models.service import Service
from ..models.user import User
from .base_repository import BaseRepository


class AvailabilityRepository(BaseRepository[AvailabilitySlot]):
    def __init__(self, db: Session):
        super().__init__(db, AvailabilitySlot)

    # Listings

    def list_for_provider(self, provider_id: str) -> List[Any]:
        """Slots owned by a provider with service name and price, by date then start."""
        query = (
            self.db.query(
                AvailabilitySlot.id.label("id"),
                AvailabilitySlot.service_id.label("service_id"),
                AvailabilitySlot.provider_id.label("provider_id"),
                AvailabilitySlot.date.label("date"),
                AvailabilitySlot.start_time.label("start_time"),
                AvailabilitySlot.end_time.label("end_time"),
                AvailabilitySlot.is_available.label("is_available"),
                Service.name.label("service_name"),
                Service.price.label("price"),
            )
            .join(Service, Service.id == AvailabilitySlot.service_id)
            .filter(AvailabilitySlot.provider_id == provider_id)
            .order_by(AvailabilitySlot.date, AvailabilitySlot.start_time, AvailabilitySlot.id)
        )
        return self._execute_query(query, "provider slot listing")

    def list_open(
        self, service_id: Optional[str] = None, on_date: Optional[date] = None
    ) -> List[Any]:
        """Slots still open for booking, optionally narrowed by service and/or date."""
        query = (
            self.db.query(
                AvailabilitySlot.id.label("id"),
                AvailabilitySlot.service_id.label("service_id"),
                AvailabilitySlot.provider_id.label("provider_id"),
                AvailabilitySlot.date.label("date"),
                AvailabilitySlot.start_time.label("start_time"),
                AvailabilitySlot.end_time.label("end_time"),
                AvailabilitySlot.is_available.label("is_available"),
                Service.name.label("service_name"),
                Service.description.label("description"),
                Service.price.label("price"),
                User.name.label("provider_name"),
            )
            .join(Service, Service.id == AvailabilitySlot.service_id)
            .join(User, User.id == AvailabilitySlot.provider_id)
            .filter(AvailabilitySlot.is_available.is_(True))
        )
        if service_id:
            query = query.filter(AvailabilitySlot.service_id == service_id)
        if on_date:
            query = query.filter(AvailabilitySlot.date == on_date)
        query = query.order_by(
            AvailabilitySlot.date, AvailabilitySlot.start_time, AvailabilitySlot.id
        )
        return self._execute_query(query, "open slot listing")

    # Row-level operations (run inside the caller's transaction)

    def lock_many(self, slot_ids: Iterable[str]) -> Dict[str, AvailabilitySlot]:
        """Lock each existing slot, in ascending id order. Missing ids are omitted."""
        locked: Dict[str, AvailabilitySlot] = {}
        for slot_id in sorted(set(slot_ids)):
            slot = self.get_for_update(slot_id)
            if slot is not None:
                locked[slot_id] = slot
        return locked

    def claim(self, slot_id: str) -> bool:
        """
        Compare-and-set ``is_available`` from True to False.

        Returns False when the slot was already taken, which also holds for
        engines without row locks where two writers can get past the SELECT.
        """
        return self._set_availability(slot_id, available=False, expected=True)

    def free(self, slot_id: str) -> bool:
        """Set ``is_available`` to True. Returns False only when the slot does not exist."""
        return self._set_availability(slot_id, available=True, expected=None)

    def find_id_by_service_and_date(self, service_id: str, on_date: date) -> Optional[str]:
        """
        Id of the slot for a booking that has no slot reference, preferring a
        taken slot. Used only for rows written before bookings referenced slots.

        Takes no lock; callers lock the returned id together with any other
        slot so that locks stay in ascending id order.
        """
        try:
            query = (
                self.db.query(AvailabilitySlot.id)
                .filter(
                    AvailabilitySlot.service_id == service_id,
                    AvailabilitySlot.date == on_date,
                )
                .order_by(
                    AvailabilitySlot.is_available,
                    AvailabilitySlot.start_time,
                    AvailabilitySlot.id,
                )
            )
            return query.limit(1).scalar()
        except SQLAlchemyError as e:
            self.logger.error("Error locating slot for %s on %s: %s", service_id, on_date, e)
            raise RepositoryException(f"Failed to locate slot: {e}") from e

    def _set_availability(self, slot_id: str, *, available: bool, expected: Optional[bool]) -> bool:
        stmt = update(AvailabilitySlot).where(AvailabilitySlot.id == slot_id)
        if expected is not None:
            stmt = stmt.where(AvailabilitySlot.is_available.is_(expected))
        stmt = stmt.values(is_available=available).execution_options(
            synchronize_session=False
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as e:
            self.logger.error("Error updating availability of slot %s: %s", slot_id, e)
            raise RepositoryException(f"Failed to update slot: {e}") from e

        changed = result.rowcount == 1
        if changed:
            slot = self.db.identity_map.get(self.db.identity_key(AvailabilitySlot, slot_id))
            if slot is not None:
                # Keep the in-session object in step without issuing another UPDATE.
                self.db.expire(slot, ["is_available"])
        return changed
