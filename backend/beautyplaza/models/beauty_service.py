# backend/beautyplaza/models/beauty_service.py
"""
Service catalog model.

A beauty service is what a customer books: it carries the price that seeds an
appointment's total and the duration used by overlap-aware conflict checks.
Services are retired by deactivation rather than deletion so that historical
appointments keep a valid reference.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.sql import func
import ulid

from ..database import Base


class BeautyService(Base):
    """Bookable salon/spa service."""

    __tablename__ = "beauty_services"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_beauty_services_price_non_negative"),
        CheckConstraint("duration_minutes > 0", name="ck_beauty_services_duration_positive"),
    )

    def __repr__(self) -> str:
        return f"<BeautyService {self.name} price={self.price} duration={self.duration_minutes}m>"
