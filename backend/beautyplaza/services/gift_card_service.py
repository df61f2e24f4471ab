# backend/beautyplaza/services/gift_card_service.py
"""
Gift Card Service for the Beauty Plaza platform.

Cards carry a 12-character uppercase hex code, an initial amount and a
running balance. A card whose balance reaches zero is deactivated.
"""

from datetime import date, timedelta
from decimal import Decimal
import logging
import secrets
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import GIFT_CARD_CODE_LENGTH
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..models.gift_card import GiftCard
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.gift_card_repository import GiftCardRepository
from ..repositories.user_repository import UserRepository
from ..schemas.gift_card import GiftCardIssue
from .base import BaseService

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5


def generate_gift_card_code() -> str:
    return secrets.token_hex(GIFT_CARD_CODE_LENGTH // 2).upper()


class GiftCardService(BaseService):
    def __init__(
        self,
        db: Session,
        repository: Optional[GiftCardRepository] = None,
        user_repository: Optional[UserRepository] = None,
        today: Optional[Callable[[], date]] = None,
        code_factory: Optional[Callable[[], str]] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_gift_card_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.today = today or date.today
        self.code_factory = code_factory or generate_gift_card_code

    def _unique_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = self.code_factory()
            if not self.repository.code_exists(code):
                return code
        raise ConflictException("Could not allocate a unique gift card code.", code="CODE_EXHAUSTED")

    def _get_by_code_or_404(self, code: str) -> GiftCard:
        card = self.repository.get_by_code(code)
        if not card:
            raise NotFoundException.for_resource("Gift card", "code", code.strip().upper())
        return card

    @BaseService.measure_operation("issue_gift_card")
    def issue(self, data: GiftCardIssue, issuer: User) -> GiftCard:
        """
        Issue a card. Admins may issue on behalf of another purchaser; everyone
        else purchases for themselves.
        """
        purchaser_id = issuer.id
        if data.purchased_by_user_id and issuer.is_admin:
            if not self.user_repository.get_by_id(data.purchased_by_user_id):
                raise NotFoundException.for_resource("User", "id", data.purchased_by_user_id)
            purchaser_id = data.purchased_by_user_id

        expiry = data.expiry_date or self.today() + timedelta(days=settings.gift_card_validity_days)
        if expiry < self.today():
            raise ValidationException("Expiry date cannot be in the past.", code="INVALID_EXPIRY")

        with self.transaction():
            card = self.repository.create(
                code=self._unique_code(),
                initial_amount=data.amount,
                current_balance=data.amount,
                expiry_date=expiry,
                is_active=True,
                purchased_by_user_id=purchaser_id,
                issued_by_user_id=issuer.id,
            )

        self.log_operation("issue_gift_card", gift_card_id=card.id, purchaser_id=purchaser_id)
        return card

    @BaseService.measure_operation("get_gift_card")
    def get_by_code(self, code: str) -> GiftCard:
        return self._get_by_code_or_404(code)

    @BaseService.measure_operation("list_gift_cards")
    def list_cards(self) -> List[GiftCard]:
        return self.repository.list_cards()

    @BaseService.measure_operation("redeem_gift_card")
    def redeem(self, code: str, amount: Decimal) -> GiftCard:
        """
        Deduct an amount from a card's balance.

        Raises:
            NotFoundException: Unknown code
            ValidationException: Inactive or expired card, or insufficient balance
        """
        with self.transaction():
            card = self._get_by_code_or_404(code)
            if not card.is_active or (card.expiry_date and card.expiry_date < self.today()):
                raise ValidationException(
                    "Gift card is inactive or expired.", code="GIFT_CARD_UNUSABLE"
                )
            balance = Decimal(card.current_balance)
            if balance < amount:
                raise ValidationException(
                    "Insufficient balance on gift card.",
                    code="GIFT_CARD_INSUFFICIENT_BALANCE",
                    details={"balance": str(balance)},
                )
            card.current_balance = balance - amount
            if card.current_balance == 0:
                card.is_active = False
            self.repository.flush()

        self.log_operation("redeem_gift_card", gift_card_id=card.id, amount=str(amount))
        return card
