# backend/beautyplaza/repositories/referral_repository.py
"""
Referral Repository for the Beauty Plaza platform.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.referral import Referral
from .base_repository import BaseRepository


class ReferralRepository(BaseRepository[Referral]):
    """Repository for referral codes."""

    def __init__(self, db: Session):
        super().__init__(db, Referral)

    def get_by_code(self, referral_code: str) -> Optional[Referral]:
        return self.find_one_by(referral_code=referral_code.strip().upper())

    def code_exists(self, referral_code: str) -> bool:
        return self.exists(referral_code=referral_code)

    def list_referrals(self) -> List[Referral]:
        return self._execute_query(self._build_query().order_by(Referral.generated_at.desc()))
