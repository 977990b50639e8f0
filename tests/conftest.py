"""
Shared fixtures.

Each test gets its own file-backed SQLite database so that sessions opened
by the application (and by worker threads) see the rows fixtures commit.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STATIC_DIR"] = ""
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from datetime import date, time, timedelta
from decimal import Decimal
from typing import Callable, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from booking_api.auth import create_token_for, get_password_hash
from booking_api.core.config import settings
from booking_api.core.enums import BookingStatus, Role
from booking_api.database import Base, Database
from booking_api.main import create_app
from booking_api.models import AvailabilitySlot, Booking, Location, Service, User
from booking_api.principal import UserPrincipal

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture(scope="session")
def test_password() -> str:
    """Standard test password for all test users."""
    return TEST_PASSWORD


@pytest.fixture(scope="session")
def password_hash(test_password: str) -> str:
    # bcrypt is slow; hash once per run
    return get_password_hash(test_password)


@pytest.fixture
def database(tmp_path) -> Database:
    database = Database.from_url(f"sqlite:///{tmp_path / 'test.db'}", settings)
    Base.metadata.create_all(database.engine)
    yield database
    database.dispose()


@pytest.fixture
def db(database: Database) -> Session:
    """A session for arranging and inspecting data; fixtures commit through it."""
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(database: Database):
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app):
    """Create a test client bound to the per-test database."""
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
    test_client.close()


def _make_user(db: Session, password_hash: str, name: str, email: str, role: Role) -> User:
    user = User(name=name, email=email, hashed_password=password_hash, role=role.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def customer(db: Session, password_hash: str) -> User:
    return _make_user(db, password_hash, "Casey Customer", "casey@example.com", Role.CUSTOMER)


@pytest.fixture
def other_customer(db: Session, password_hash: str) -> User:
    return _make_user(db, password_hash, "Dana Customer", "dana@example.com", Role.CUSTOMER)


@pytest.fixture
def provider(db: Session, password_hash: str) -> User:
    return _make_user(db, password_hash, "Pat Provider", "pat@example.com", Role.PROVIDER)


@pytest.fixture
def other_provider(db: Session, password_hash: str) -> User:
    return _make_user(db, password_hash, "Quinn Provider", "quinn@example.com", Role.PROVIDER)


def principal_of(user: User) -> UserPrincipal:
    return UserPrincipal(user_id=user.id, email=user.email, role=Role(user.role))


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_token_for(principal_of(user))}"}


@pytest.fixture
def customer_principal(customer: User) -> UserPrincipal:
    return principal_of(customer)


@pytest.fixture
def other_customer_principal(other_customer: User) -> UserPrincipal:
    return principal_of(other_customer)


@pytest.fixture
def provider_principal(provider: User) -> UserPrincipal:
    return principal_of(provider)


@pytest.fixture
def auth_headers_customer(customer: User) -> dict:
    return headers_for(customer)


@pytest.fixture
def auth_headers_other_customer(other_customer: User) -> dict:
    return headers_for(other_customer)


@pytest.fixture
def auth_headers_provider(provider: User) -> dict:
    return headers_for(provider)


@pytest.fixture
def auth_headers_other_provider(other_provider: User) -> dict:
    return headers_for(other_provider)


@pytest.fixture
def location(db: Session) -> Location:
    location = Location(name="Downtown Studio", address="1 Main St")
    db.add(location)
    db.commit()
    return location


@pytest.fixture
def service(db: Session, provider: User, location: Location) -> Service:
    service = Service(
        provider_id=provider.id,
        location_id=location.id,
        name="Haircut",
        description="Wash and cut",
        price=Decimal("50.00"),
    )
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def second_service(db: Session, provider: User) -> Service:
    service = Service(provider_id=provider.id, name="Beard Trim", price=Decimal("20.00"))
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def foreign_service(db: Session, other_provider: User) -> Service:
    service = Service(provider_id=other_provider.id, name="Massage", price=Decimal("80.00"))
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def future_date() -> date:
    return date.today() + timedelta(days=7)


@pytest.fixture
def past_date() -> date:
    return date.today() - timedelta(days=3)


@pytest.fixture
def slot_factory(db: Session) -> Callable[..., AvailabilitySlot]:
    def _make(
        service: Service,
        day: date,
        start: time = time(9, 0),
        end: time = time(10, 0),
        is_available: bool = True,
    ) -> AvailabilitySlot:
        slot = AvailabilitySlot(
            service_id=service.id,
            provider_id=service.provider_id,
            date=day,
            start_time=start,
            end_time=end,
            is_available=is_available,
        )
        db.add(slot)
        db.commit()
        return slot

    return _make


@pytest.fixture
def booking_factory(db: Session) -> Callable[..., Booking]:
    """Book a slot directly in the database, flipping its availability."""

    def _make(
        customer: User, slot: AvailabilitySlot, link_slot: Optional[bool] = True
    ) -> Booking:
        booking = Booking(
            customer_id=customer.id,
            service_id=slot.service_id,
            availability_id=slot.id if link_slot else None,
            booking_date=slot.date,
            status=BookingStatus.CONFIRMED.value,
        )
        slot.is_available = False
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def slot(slot_factory, service: Service, future_date: date) -> AvailabilitySlot:
    return slot_factory(service, future_date)


@pytest.fixture
def later_slot(slot_factory, service: Service, future_date: date) -> AvailabilitySlot:
    return slot_factory(service, future_date + timedelta(days=1), time(14, 0), time(15, 0))


@pytest.fixture
def other_service_slot(
    slot_factory, second_service: Service, future_date: date
) -> AvailabilitySlot:
    return slot_factory(second_service, future_date, time(11, 0), time(12, 0))
