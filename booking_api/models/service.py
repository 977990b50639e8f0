# booking_api/models/service.py
"""
Service model.

A service is a priced offering owned by exactly one provider. Slots are
published against it and bookings reference it.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from ._helpers import generate_ulid, utcnow


class Service(Base):
    __tablename__ = "services"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    provider_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    location_id = Column(String(26), ForeignKey("locations.id"), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    provider = relationship("User", back_populates="services")
    location = relationship("Location", back_populates="services")
    slots = relationship("AvailabilitySlot", back_populates="service")

    def __repr__(self) -> str:
        return f"<Service {self.name} provider={self.provider_id}>"
