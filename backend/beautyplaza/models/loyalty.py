# backend/beautyplaza/models/loyalty.py
"""
Loyalty points ledger.

Each row is one EARNED or REDEEMED transaction; a user's balance is the sum of
earned points minus the sum of redeemed points.
"""

from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func
import ulid

from ..database import Base


class TransactionType(str, Enum):
    EARNED = "EARNED"
    REDEEMED = "REDEEMED"


class RedemptionMethod(str, Enum):
    GIFT_CARD = "GIFT_CARD"
    BANK_CREDIT = "BANK_CREDIT"


class LoyaltyTransaction(Base):
    """Single entry in a user's loyalty ledger."""

    __tablename__ = "loyalty_transactions"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    transaction_type = Column(String(20), nullable=False)
    points = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    appointment_id = Column(
        String(26), ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )

    # Redemption details (REDEEMED only)
    redemption_method = Column(String(20), nullable=True)
    bank_account = Column(String(34), nullable=True)
    routing_number = Column(String(20), nullable=True)
    redemption_value = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "transaction_type IN ('EARNED', 'REDEEMED')", name="ck_loyalty_transaction_type"
        ),
        CheckConstraint("points >= 0", name="ck_loyalty_points_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<LoyaltyTransaction {self.transaction_type} {self.points} user={self.user_id}>"
