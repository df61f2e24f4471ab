# backend/beautyplaza/services/referral_service.py
"""
Referral Service for the Beauty Plaza platform.

A user generates a code, shares it, and the code is completed once the
referred person has an account.
"""

from datetime import datetime, timezone
import logging
import secrets
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import REFERRAL_CODE_LENGTH
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..models.referral import Referral, ReferralStatus
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.referral_repository import ReferralRepository
from ..repositories.user_repository import UserRepository
from ..schemas.referral import ReferralGenerate
from .base import BaseService

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5


def generate_referral_code() -> str:
    return secrets.token_hex(REFERRAL_CODE_LENGTH // 2).upper()


class ReferralService(BaseService):
    def __init__(
        self,
        db: Session,
        repository: Optional[ReferralRepository] = None,
        user_repository: Optional[UserRepository] = None,
        code_factory: Optional[Callable[[], str]] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_referral_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.code_factory = code_factory or generate_referral_code

    def _unique_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = self.code_factory()
            if not self.repository.code_exists(code):
                return code
        raise ConflictException("Could not allocate a unique referral code.", code="CODE_EXHAUSTED")

    def _get_by_code_or_404(self, referral_code: str) -> Referral:
        referral = self.repository.get_by_code(referral_code)
        if not referral:
            raise NotFoundException.for_resource("Referral", "code", referral_code.strip().upper())
        return referral

    @BaseService.measure_operation("generate_referral")
    def generate(self, data: ReferralGenerate, principal: User) -> Referral:
        referrer_id = principal.id
        if data.referrer_user_id and principal.is_admin:
            if not self.user_repository.get_by_id(data.referrer_user_id):
                raise NotFoundException.for_resource("User", "id", data.referrer_user_id)
            referrer_id = data.referrer_user_id

        with self.transaction():
            referral = self.repository.create(
                referrer_user_id=referrer_id,
                referral_code=self._unique_code(),
                referred_user_email=(
                    str(data.referred_user_email).lower() if data.referred_user_email else None
                ),
                status=ReferralStatus.PENDING.value,
            )
        self.log_operation("generate_referral", referral_id=referral.id, referrer_id=referrer_id)
        return referral

    @BaseService.measure_operation("get_referral")
    def get_by_code(self, referral_code: str) -> Referral:
        return self._get_by_code_or_404(referral_code)

    @BaseService.measure_operation("list_referrals")
    def list_referrals(self) -> List[Referral]:
        return self.repository.list_referrals()

    @BaseService.measure_operation("complete_referral")
    def complete(self, referral_code: str, referred_user_id: str) -> Referral:
        """
        Mark a referral as completed by the referred user.

        Raises:
            NotFoundException: Unknown code or referred user
            ConflictException: Already completed
            ValidationException: Cancelled referral or self-referral
        """
        with self.transaction():
            referral = self._get_by_code_or_404(referral_code)
            if referral.status == ReferralStatus.COMPLETED.value:
                raise ConflictException("Referral already completed.", code="REFERRAL_COMPLETED")
            if referral.status == ReferralStatus.CANCELLED.value:
                raise ValidationException(
                    "Referral has been cancelled.", code="REFERRAL_CANCELLED"
                )
            if not self.user_repository.get_by_id(referred_user_id):
                raise NotFoundException.for_resource("User", "id", referred_user_id)
            if referred_user_id == referral.referrer_user_id:
                raise ValidationException("Users cannot refer themselves.", code="SELF_REFERRAL")

            referral.referred_user_id = referred_user_id
            referral.status = ReferralStatus.COMPLETED.value
            referral.completed_at = datetime.now(timezone.utc)
            self.repository.flush()

        self.log_operation("complete_referral", referral_id=referral.id)
        return referral
