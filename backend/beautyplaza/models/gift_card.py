# backend/beautyplaza/models/gift_card.py
"""Prepaid gift cards with a running balance."""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func
import ulid

from ..database import Base


class GiftCard(Base):
    """Gift card identified by a unique redemption code."""

    __tablename__ = "gift_cards"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    code = Column(String(32), unique=True, nullable=False, index=True)
    initial_amount = Column(Numeric(10, 2), nullable=False)
    current_balance = Column(Numeric(10, 2), nullable=False)
    expiry_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    purchased_by_user_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    issued_by_user_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("current_balance >= 0", name="ck_gift_cards_balance_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<GiftCard {self.code} balance={self.current_balance} active={self.is_active}>"
