# backend/beautyplaza/models/appointment.py
"""
Appointment model for the Beauty Plaza platform.

An appointment links one customer, one service and one technician to a date
and local start time. References are stored as plain foreign keys and resolved
by the services layer; the model declares no ORM relationships or cascades.

The customer's phone and email are snapshotted at booking time so the
appointment stays interpretable if the customer record later changes. The
email snapshot is also the address OTP confirmation codes are keyed by.
"""

from enum import Enum
import logging
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)

TECHNICIAN_SLOT_CONSTRAINT = "uq_appointments_technician_slot"


class AppointmentStatus(str, Enum):
    """Appointment lifecycle statuses."""

    SCHEDULED = "SCHEDULED"  # Created, awaiting OTP confirmation
    CONFIRMED = "CONFIRMED"  # Customer confirmed via OTP
    COMPLETED = "COMPLETED"  # Service delivered
    CANCELLED = "CANCELLED"
    PAID = "PAID"


class ServiceType(str, Enum):
    """Where the service takes place."""

    IN_STORE = "in-store"
    IN_HOME = "in-home"


class Appointment(Base):
    """
    Scheduled booking of a service with a technician.

    At most one appointment may hold a given (technician, date, time) slot;
    the unique constraint backs up the service-level conflict check under
    concurrent writes.
    """

    __tablename__ = "appointments"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    # References
    customer_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(String(26), ForeignKey("beauty_services.id"), nullable=False)
    technician_id = Column(String(26), ForeignKey("technicians.id"), nullable=False, index=True)

    # Scheduling
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(Time, nullable=False)
    service_type = Column(String(20), nullable=False, default=ServiceType.IN_STORE.value)

    # Commercial
    total_amount = Column(Numeric(10, 2), nullable=False)
    loyalty_points_used = Column(Integer, nullable=False, default=0)
    loyalty_discount = Column(Numeric(10, 2), nullable=False, default=0)

    # Lifecycle
    status = Column(
        String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value, index=True
    )
    otp_verified = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    # Contact snapshot
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint(
            "technician_id",
            "appointment_date",
            "appointment_time",
            name=TECHNICIAN_SLOT_CONSTRAINT,
        ),
        CheckConstraint(
            "status IN ('SCHEDULED', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'PAID')",
            name="ck_appointments_status",
        ),
        CheckConstraint(
            "service_type IN ('in-store', 'in-home')",
            name="ck_appointments_service_type",
        ),
        CheckConstraint("total_amount >= 0", name="ck_appointments_amount_non_negative"),
        CheckConstraint("loyalty_points_used >= 0", name="ck_appointments_points_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize as an unconfirmed, scheduled appointment by default."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = AppointmentStatus.SCHEDULED.value
        if self.otp_verified is None:
            self.otp_verified = False
        if self.loyalty_points_used is None:
            self.loyalty_points_used = 0
        if self.loyalty_discount is None:
            self.loyalty_discount = 0

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Appointment {self.id}: customer={self.customer_id}, "
            f"technician={self.technician_id}, date={self.appointment_date}, "
            f"time={self.appointment_time}, status={self.status}>"
        )

    @property
    def contact_address(self) -> str:
        """Address OTP challenges for this appointment are keyed by."""
        return (self.email or "").strip().lower()
