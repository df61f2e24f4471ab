# backend/beautyplaza/repositories/loyalty_repository.py
"""
Loyalty ledger repository for the Beauty Plaza platform.

The ledger is append-only from the application's point of view; balances are
computed from it rather than stored.
"""

import logging
from typing import List

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ..models.loyalty import LoyaltyTransaction, TransactionType
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class LoyaltyRepository(BaseRepository[LoyaltyTransaction]):
    """Repository for loyalty point transactions."""

    def __init__(self, db: Session):
        super().__init__(db, LoyaltyTransaction)

    def list_for_user(self, user_id: str) -> List[LoyaltyTransaction]:
        """A user's transactions, newest first."""
        query = (
            self._build_query()
            .filter(LoyaltyTransaction.user_id == user_id)
            .order_by(LoyaltyTransaction.created_at.desc(), LoyaltyTransaction.id.desc())
        )
        return self._execute_query(query)

    def list_transactions(self) -> List[LoyaltyTransaction]:
        query = self._build_query().order_by(
            LoyaltyTransaction.created_at.desc(), LoyaltyTransaction.id.desc()
        )
        return self._execute_query(query)

    def get_balance(self, user_id: str) -> int:
        """Sum of EARNED points minus sum of REDEEMED points."""
        signed_points = case(
            (
                LoyaltyTransaction.transaction_type == TransactionType.REDEEMED.value,
                -LoyaltyTransaction.points,
            ),
            else_=LoyaltyTransaction.points,
        )
        query = self.db.query(func.coalesce(func.sum(signed_points), 0)).filter(
            LoyaltyTransaction.user_id == user_id
        )
        return int(self._execute_scalar(query) or 0)
