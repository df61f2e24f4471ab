# backend/beautyplaza/services/auth_service.py
"""
Authentication Service for the Beauty Plaza platform.

Handles self-service registration and credential checks. Token creation
lives in ``beautyplaza.auth``; this service only decides who the caller is.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ..auth import create_access_token, get_password_hash, verify_password
from ..core.constants import ERROR_INVALID_CREDENTIALS, ERROR_USER_NOT_FOUND
from ..core.enums import RoleName
from ..core.exceptions import (
    ConflictException,
    NotFoundException,
    RepositoryException,
    UnauthorizedException,
)
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from ..schemas.auth import RegisterRequest
from .base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Service for registration and authentication."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(self, data: RegisterRequest) -> User:
        """
        Register a new customer account.

        Raises:
            ConflictException: If the email is already registered
        """
        email = str(data.email).strip().lower()
        self.log_operation("register_user", email=email)

        if self.user_repository.get_by_email(email):
            raise ConflictException("Email already registered", code="EMAIL_TAKEN")

        with self.transaction():
            try:
                user = self.user_repository.create(
                    email=email,
                    hashed_password=get_password_hash(data.password),
                    full_name=data.full_name,
                    phone=data.phone,
                    role=RoleName.CUSTOMER.value,
                    is_active=True,
                )
            except RepositoryException as exc:
                # Lost a race with a concurrent registration
                raise ConflictException("Email already registered", code="EMAIL_TAKEN") from exc

        self.logger.info(f"Registered customer {user.id}")
        return user

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user by email and password.

        Returns:
            User object if authentication successful, None otherwise
        """
        self.logger.info(f"Authentication attempt for user: {email}")

        user = self.user_repository.get_by_email(email)
        if not user:
            self.logger.warning(f"Authentication failed - user not found: {email}")
            return None

        if not verify_password(password, user.hashed_password):
            self.logger.warning(f"Authentication failed - incorrect password: {email}")
            return None

        if not user.is_active:
            self.logger.warning(f"Authentication failed - account deactivated: {email}")
            return None

        return user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Exchange credentials for an access token.

        Raises:
            UnauthorizedException: On unknown email, wrong password or inactive account
        """
        user = self.authenticate_user(email, password)
        if user is None:
            raise UnauthorizedException(ERROR_INVALID_CREDENTIALS, code="INVALID_CREDENTIALS")
        token = create_access_token(data={"sub": user.email})
        return token, user

    @BaseService.measure_operation("get_current_user")
    def get_current_user(self, email: str) -> User:
        """
        Load the user a token was issued for.

        Raises:
            NotFoundException: If the user no longer exists
        """
        user = self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundException(ERROR_USER_NOT_FOUND, code="USER_NOT_FOUND")
        return user
