# backend/beautyplaza/models/technician.py
"""Technician roster model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func
import ulid

from ..database import Base


class Technician(Base):
    """
    A bookable technician.

    ``is_available`` gates new bookings only; existing appointments are not
    re-validated when a technician is later disabled. ``user_id`` optionally links
    the technician to a login so they can see and update their own appointments.
    """

    __tablename__ = "technicians"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False)
    # Generic JSON for cross-dialect compatibility (SQLite in tests)
    specialties = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True, index=True)
    image_url = Column(String(500), nullable=True)
    user_id = Column(String(26), ForeignKey("users.id"), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Technician {self.name} available={self.is_available}>"
