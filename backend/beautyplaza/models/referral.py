# backend/beautyplaza/models/referral.py
"""Customer referral codes."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func
import ulid

from ..database import Base


class ReferralStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Referral(Base):
    """A referral code issued to a referrer, completed once the referred user signs up."""

    __tablename__ = "referrals"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    referrer_user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    referral_code = Column(String(16), unique=True, nullable=False, index=True)
    referred_user_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    referred_user_email = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default=ReferralStatus.PENDING.value)
    generated_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Referral {self.referral_code} status={self.status}>"
