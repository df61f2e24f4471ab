# backend/beautyplaza/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from functools import lru_cache
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.otp_store import InMemoryOtpStore, OtpStore, RedisOtpStore
from ...core.redis import get_redis
from ...services.appointment_service import AppointmentService
from ...services.auth_service import AuthService
from ...services.catalog_service import CatalogService
from ...services.gift_card_service import GiftCardService
from ...services.loyalty_service import LoyaltyService
from ...services.otp_service import OtpService
from ...services.promotion_service import PromotionService
from ...services.referral_service import ReferralService
from ...services.settings_service import SettingsService
from ...services.technician_service import TechnicianService
from ...services.user_service import UserService
from .database import get_db

logger = logging.getLogger(__name__)


def _build_otp_store() -> OtpStore:
    if settings.otp_store_backend == "redis":
        logger.info("Using Redis OTP store")
        return RedisOtpStore(get_redis(), key_prefix=settings.otp_key_prefix)
    logger.info("Using in-memory OTP store")
    return InMemoryOtpStore()


@lru_cache(maxsize=1)
def get_otp_service() -> OtpService:
    """Process-wide OTP service; challenges must outlive a single request."""
    return OtpService(_build_otp_store())


def get_appointment_service(
    db: Session = Depends(get_db), otp_service: OtpService = Depends(get_otp_service)
) -> AppointmentService:
    """
    Get appointment service instance.

    Args:
        db: Database session
        otp_service: Shared OTP service

    Returns:
        AppointmentService instance
    """
    return AppointmentService(db, otp_service=otp_service)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_technician_service(db: Session = Depends(get_db)) -> TechnicianService:
    return TechnicianService(db)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_loyalty_service(db: Session = Depends(get_db)) -> LoyaltyService:
    return LoyaltyService(db)


def get_gift_card_service(db: Session = Depends(get_db)) -> GiftCardService:
    return GiftCardService(db)


def get_promotion_service(db: Session = Depends(get_db)) -> PromotionService:
    return PromotionService(db)


def get_referral_service(db: Session = Depends(get_db)) -> ReferralService:
    return ReferralService(db)
