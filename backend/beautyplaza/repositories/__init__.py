# backend/beautyplaza/repositories/__init__.py
"""
Repository layer for the Beauty Plaza platform.

Repositories encapsulate all SQLAlchemy access; services never query the
session directly.
"""

from .appointment_repository import AppointmentRepository
from .base_repository import BaseRepository, IRepository
from .beauty_service_repository import BeautyServiceRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .gift_card_repository import GiftCardRepository
from .loyalty_repository import LoyaltyRepository
from .promotion_repository import PromotionRepository
from .referral_repository import ReferralRepository
from .setting_repository import SettingRepository
from .technician_repository import TechnicianRepository
from .user_repository import UserRepository

__all__ = [
    "AppointmentRepository",
    "BaseRepository",
    "BeautyServiceRepository",
    "ConflictCheckerRepository",
    "GiftCardRepository",
    "IRepository",
    "LoyaltyRepository",
    "PromotionRepository",
    "ReferralRepository",
    "RepositoryFactory",
    "SettingRepository",
    "TechnicianRepository",
    "UserRepository",
]
