# backend/beautyplaza/repositories/gift_card_repository.py
"""
Gift Card Repository for the Beauty Plaza platform.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.gift_card import GiftCard
from .base_repository import BaseRepository


class GiftCardRepository(BaseRepository[GiftCard]):
    """Repository for gift card data access."""

    def __init__(self, db: Session):
        super().__init__(db, GiftCard)

    def get_by_code(self, code: str) -> Optional[GiftCard]:
        return self.find_one_by(code=code.strip().upper())

    def code_exists(self, code: str) -> bool:
        return self.exists(code=code)

    def list_cards(self) -> List[GiftCard]:
        return self._execute_query(self._build_query().order_by(GiftCard.created_at.desc()))
