# booking_api/models/availability.py
"""
Availability slot model.

Slots are never deleted. Booking flips ``is_available`` to False and
cancellation or rescheduling flips it back.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Time,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ._helpers import generate_ulid, utcnow


class AvailabilitySlot(Base):
    __tablename__ = "availability"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)
    # Denormalized owner, used for provider listings and ownership checks
    provider_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    service = relationship("Service", back_populates="slots")
    provider = relationship("User")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_availability_time_order"),
        Index("idx_availability_service_date", "service_id", "date"),
        Index("idx_availability_open_date", "is_available", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilitySlot {self.id} {self.date} {self.start_time}-{self.end_time} "
            f"available={self.is_available}>"
        )
