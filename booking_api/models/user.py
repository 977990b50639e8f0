# booking_api/models/user.py
"""
User model.

A user is either a customer, who books slots, or a provider, who owns
services and publishes availability for them.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import relationship

from ..core.enums import Role
from ..database import Base
from ._helpers import generate_ulid, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.CUSTOMER.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    services = relationship("Service", back_populates="provider")
    bookings = relationship("Booking", back_populates="customer")

    __table_args__ = (
        CheckConstraint("role IN ('customer', 'provider')", name="ck_users_role"),
    )

    @property
    def is_provider(self) -> bool:
        return self.role == Role.PROVIDER.value

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
