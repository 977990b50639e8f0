# booking_api/models/booking.py
"""
Booking model.

A booking holds a direct reference to the slot it occupies. The UNIQUE
constraint on ``availability_id`` keeps a slot from backing two bookings.
Rows without a slot reference are matched to a slot by (service, date).
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from ..core.enums import BookingStatus
from ..database import Base
from ._helpers import generate_ulid, utcnow


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    customer_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)
    availability_id = Column(
        String(26),
        ForeignKey("availability.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    booking_date = Column("date", Date, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    customer = relationship("User", back_populates="bookings")
    service = relationship("Service")
    slot = relationship("AvailabilitySlot")

    __table_args__ = (Index("idx_bookings_service_date", "service_id", "date"),)

    def __repr__(self) -> str:
        return f"<Booking {self.id} customer={self.customer_id} date={self.booking_date}>"
