# booking_api/models/location.py
from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from ..database import Base
from ._helpers import generate_ulid, utcnow


class Location(Base):
    """Named place where a service is delivered."""

    __tablename__ = "locations"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    services = relationship("Service", back_populates="location")

    def __repr__(self) -> str:
        return f"<Location {self.name}>"
