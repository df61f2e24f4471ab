# backend/beautyplaza/repositories/promotion_repository.py
"""
Promotion Repository for the Beauty Plaza platform.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.promotion import Promotion
from .base_repository import BaseRepository


class PromotionRepository(BaseRepository[Promotion]):
    """Repository for promotional discount codes."""

    def __init__(self, db: Session):
        super().__init__(db, Promotion)

    def get_by_code(self, promo_code: str) -> Optional[Promotion]:
        return self.find_one_by(promo_code=promo_code.strip().upper())

    def list_promotions(self) -> List[Promotion]:
        return self._execute_query(self._build_query().order_by(Promotion.name, Promotion.id))

    def list_active(self, today: date) -> List[Promotion]:
        """Active promotions whose end date has not passed (open-ended included)."""
        query = self._build_query().filter(
            Promotion.is_active.is_(True),
            or_(Promotion.end_date.is_(None), Promotion.end_date >= today),
        )
        return self._execute_query(query.order_by(Promotion.name, Promotion.id))
