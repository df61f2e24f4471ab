# backend/beautyplaza/repositories/user_repository.py
"""
User Repository for the Beauty Plaza platform.
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user account data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Look up a user by email, case-insensitively."""
        query = self._build_query().filter(func.lower(User.email) == email.strip().lower())
        results = self._execute_query(query.limit(1))
        return results[0] if results else None

    def list_users(self, skip: int = 0, limit: int = 100) -> List[User]:
        """Users ordered by creation."""
        query = self._build_query().order_by(User.created_at, User.id).offset(skip).limit(limit)
        return self._execute_query(query)

