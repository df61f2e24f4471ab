# backend/beautyplaza/repositories/factory.py
"""
One place that knows how to build each repository.

Services take optional repository arguments for tests and fall back to
these constructors otherwise. Imports are local to keep the model and
repository modules free of import cycles.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from .appointment_repository import AppointmentRepository
    from .beauty_service_repository import BeautyServiceRepository
    from .conflict_checker_repository import ConflictCheckerRepository
    from .gift_card_repository import GiftCardRepository
    from .loyalty_repository import LoyaltyRepository
    from .promotion_repository import PromotionRepository
    from .referral_repository import ReferralRepository
    from .setting_repository import SettingRepository
    from .technician_repository import TechnicianRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Static constructors for the concrete repositories."""

    @staticmethod
    def create_appointment_repository(db: Session) -> "AppointmentRepository":
        """Create repository for appointment operations."""
        from .appointment_repository import AppointmentRepository

        return AppointmentRepository(db)

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> "ConflictCheckerRepository":
        """Create repository for conflict checking queries."""
        from .conflict_checker_repository import ConflictCheckerRepository

        return ConflictCheckerRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user account operations."""
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_beauty_service_repository(db: Session) -> "BeautyServiceRepository":
        """Create repository for the service catalog."""
        from .beauty_service_repository import BeautyServiceRepository

        return BeautyServiceRepository(db)

    @staticmethod
    def create_technician_repository(db: Session) -> "TechnicianRepository":
        """Create repository for the technician roster."""
        from .technician_repository import TechnicianRepository

        return TechnicianRepository(db)

    @staticmethod
    def create_setting_repository(db: Session) -> "SettingRepository":
        from .setting_repository import SettingRepository

        return SettingRepository(db)

    @staticmethod
    def create_loyalty_repository(db: Session) -> "LoyaltyRepository":
        from .loyalty_repository import LoyaltyRepository

        return LoyaltyRepository(db)

    @staticmethod
    def create_gift_card_repository(db: Session) -> "GiftCardRepository":
        from .gift_card_repository import GiftCardRepository

        return GiftCardRepository(db)

    @staticmethod
    def create_promotion_repository(db: Session) -> "PromotionRepository":
        from .promotion_repository import PromotionRepository

        return PromotionRepository(db)

    @staticmethod
    def create_referral_repository(db: Session) -> "ReferralRepository":
        from .referral_repository import ReferralRepository

        return ReferralRepository(db)
