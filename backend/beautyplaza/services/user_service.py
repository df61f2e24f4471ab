# backend/beautyplaza/services/user_service.py
"""
User administration service for the Beauty Plaza platform.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..core.exceptions import ConflictException, NotFoundException, RepositoryException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from ..schemas.user import UserCreate, UserUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Admin CRUD over user accounts."""

    def __init__(self, db: Session, repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_user_repository(db)

    def _get_or_404(self, user_id: str) -> User:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundException.for_resource("User", "id", user_id)
        return user

    @BaseService.measure_operation("list_users")
    def list_users(self, skip: int = 0, limit: int = 100) -> List[User]:
        return self.repository.list_users(skip=skip, limit=limit)

    @BaseService.measure_operation("get_user")
    def get_user(self, user_id: str) -> User:
        return self._get_or_404(user_id)

    @BaseService.measure_operation("get_user_by_email")
    def get_by_email(self, email: str) -> User:
        """Case-insensitive lookup; raises NotFoundException for unknown addresses."""
        user = self.repository.get_by_email(email)
        if not user:
            raise NotFoundException.for_resource("User", "email", email.strip().lower())
        return user

    @BaseService.measure_operation("create_user")
    def create_user(self, data: UserCreate) -> User:
        email = str(data.email).strip().lower()
        if self.repository.get_by_email(email):
            raise ConflictException("Email already registered", code="EMAIL_TAKEN")

        with self.transaction():
            try:
                user = self.repository.create(
                    email=email,
                    hashed_password=get_password_hash(data.password),
                    full_name=data.full_name.strip(),
                    phone=data.phone,
                    role=data.role.value,
                    is_active=data.is_active,
                )
            except RepositoryException as exc:
                raise ConflictException("Email already registered", code="EMAIL_TAKEN") from exc

        self.log_operation("create_user", user_id=user.id, role=user.role)
        return user

    @BaseService.measure_operation("update_user")
    def update_user(self, user_id: str, data: UserUpdate) -> User:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        password = changes.pop("password", None)
        if "role" in changes:
            changes["role"] = data.role.value if data.role else changes["role"]
        if password:
            changes["hashed_password"] = get_password_hash(password)

        with self.transaction():
            user = self._get_or_404(user_id)
            for field, value in changes.items():
                setattr(user, field, value)
            self.repository.flush()

        self.log_operation("update_user", user_id=user_id, fields=sorted(changes))
        return user

    @BaseService.measure_operation("delete_user")
    def delete_user(self, user_id: str) -> None:
        """
        Delete a user account.

        Raises:
            NotFoundException: If the user does not exist
            ConflictException: If appointments or other records still reference the user
        """
        with self.transaction():
            try:
                deleted = self.repository.delete(user_id)
            except RepositoryException as exc:
                raise ConflictException(
                    "User cannot be deleted while other records reference it.",
                    code="USER_IN_USE",
                ) from exc
            if not deleted:
                raise NotFoundException.for_resource("User", "id", user_id)
        self.log_operation("delete_user", user_id=user_id)
