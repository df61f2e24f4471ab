# backend/beautyplaza/models/user.py
"""
User model for the Beauty Plaza platform.

A single users table backs administrators, technicians (when linked from a
technician record) and customers, differentiated by the ``role`` column.

Classes:
    User: Account used for authentication and as the appointment customer
"""

import logging

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String
from sqlalchemy.sql import func
import ulid

from ..core.enums import RoleName
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Account model for authentication and role management.

    Attributes:
        id: ULID primary key
        email: Unique email address used for login
        hashed_password: Bcrypt hashed password
        full_name: Display name
        phone: Ten digit phone number (optional)
        role: One of admin, technician, customer
        is_active: Whether the account may sign in
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default=RoleName.CUSTOMER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'technician', 'customer')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role}>"

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value

    @property
    def is_technician(self) -> bool:
        return self.role == RoleName.TECHNICIAN.value

    @property
    def is_customer(self) -> bool:
        return self.role == RoleName.CUSTOMER.value
