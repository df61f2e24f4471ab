"""
Database models for the Beauty Plaza platform.

This module exports all SQLAlchemy models used in the application:
- Accounts (User)
- Catalog and roster (BeautyService, Technician)
- Appointments
- Settings
- Loyalty ledger, gift cards, promotions and referrals
"""

from .appointment import Appointment, AppointmentStatus, ServiceType
from .beauty_service import BeautyService
from .gift_card import GiftCard
from .loyalty import LoyaltyTransaction, RedemptionMethod, TransactionType
from .promotion import DiscountType, Promotion
from .referral import Referral, ReferralStatus
from .setting import Setting
from .technician import Technician
from .user import User

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "BeautyService",
    "DiscountType",
    "GiftCard",
    "LoyaltyTransaction",
    "Promotion",
    "RedemptionMethod",
    "Referral",
    "ReferralStatus",
    "ServiceType",
    "Setting",
    "Technician",
    "TransactionType",
    "User",
]
