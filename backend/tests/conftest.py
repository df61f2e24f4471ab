# backend/tests/conftest.py
"""
Pytest configuration.

The environment is pinned BEFORE any beautyplaza import so settings never
pick up a developer .env (no real database, no Redis).
"""

import os

os.environ["CI"] = "true"
os.environ["IS_TESTING"] = "true"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OTP_STORE_BACKEND"] = "memory"
os.environ["CONFLICT_MODE"] = "exact"

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from beautyplaza import models  # noqa: F401  registers mappers
from beautyplaza.api.dependencies.database import get_db
from beautyplaza.api.dependencies.services import get_otp_service
from beautyplaza.auth import create_access_token, get_password_hash
from beautyplaza.core.enums import RoleName
from beautyplaza.core.otp_store import InMemoryOtpStore
from beautyplaza.database import Base
from beautyplaza.main import fastapi_app as app
from beautyplaza.models.appointment import Appointment, AppointmentStatus
from beautyplaza.models.beauty_service import BeautyService
from beautyplaza.models.technician import Technician
from beautyplaza.models.user import User
from beautyplaza.services.otp_service import OtpService

# One shared in-memory database; StaticPool keeps it alive across the
# worker threads route handlers run service calls in.
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)

TEST_PASSWORD = "TestPassword123!"
TEST_OTP_CODE = "123456"
BOOKING_DATE = date(2030, 6, 1)


class FakeClock:
    """Controllable UTC clock for OTP expiry."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="function")
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def otp_clock() -> FakeClock:
    return FakeClock(datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def otp_service(otp_clock: FakeClock) -> OtpService:
    """OTP service with a fixed code and controllable clock."""
    return OtpService(
        InMemoryOtpStore(),
        ttl_seconds=300,
        max_attempts=5,
        clock=otp_clock,
        code_factory=lambda length: TEST_OTP_CODE,
    )


@pytest.fixture
def client(db: Session, otp_service: OtpService):
    """Create a test client bound to the test session and OTP service."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp_service] = lambda: otp_service

    # Don't use context manager; the lifespan would create tables on the app engine
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


def _create_user(db: Session, email: str, full_name: str, role: RoleName, **extra) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        full_name=full_name,
        role=role.value,
        **extra,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def admin_user(db: Session) -> User:
    return _create_user(db, "admin@beautyplaza.test", "Ada Admin", RoleName.ADMIN)


@pytest.fixture
def customer_user(db: Session) -> User:
    return _create_user(
        db, "carol.customer@example.com", "Carol Customer", RoleName.CUSTOMER, phone="5551234567"
    )


@pytest.fixture
def other_customer(db: Session) -> User:
    return _create_user(db, "oscar.other@example.com", "Oscar Other", RoleName.CUSTOMER)


@pytest.fixture
def technician_user(db: Session) -> User:
    return _create_user(db, "tina.tech@beautyplaza.test", "Tina Tech", RoleName.TECHNICIAN)


@pytest.fixture
def technician(db: Session, technician_user: User) -> Technician:
    tech = Technician(
        name="Tina Tech",
        specialties=["hair", "nails"],
        is_available=True,
        user_id=technician_user.id,
    )
    db.add(tech)
    db.commit()
    db.refresh(tech)
    return tech


@pytest.fixture
def second_technician(db: Session) -> Technician:
    tech = Technician(name="Theo Second", specialties=["spa"], is_available=True)
    db.add(tech)
    db.commit()
    db.refresh(tech)
    return tech


@pytest.fixture
def haircut(db: Session) -> BeautyService:
    service = BeautyService(
        name="Haircut", description="Wash and cut", price=Decimal("50.00"), duration_minutes=60
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def manicure(db: Session) -> BeautyService:
    service = BeautyService(name="Manicure", price=Decimal("30.00"), duration_minutes=30)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def make_appointment(db: Session, customer_user: User, technician: Technician, haircut: BeautyService):
    """Insert an appointment directly, bypassing the booking workflow."""

    def _make(**overrides) -> Appointment:
        values = {
            "customer_id": customer_user.id,
            "service_id": haircut.id,
            "technician_id": technician.id,
            "appointment_date": BOOKING_DATE,
            "appointment_time": time(10, 0),
            "total_amount": Decimal("50.00"),
            "status": AppointmentStatus.SCHEDULED.value,
            "email": customer_user.email,
        }
        values.update(overrides)
        appointment = Appointment(**values)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make


def _headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_admin(admin_user: User) -> dict:
    return _headers_for(admin_user)


@pytest.fixture
def auth_headers_customer(customer_user: User) -> dict:
    return _headers_for(customer_user)


@pytest.fixture
def auth_headers_other_customer(other_customer: User) -> dict:
    return _headers_for(other_customer)


@pytest.fixture
def auth_headers_technician(technician: Technician, technician_user: User) -> dict:
    return _headers_for(technician_user)
