# backend/beautyplaza/api/dependencies/auth.py
"""
Authentication dependencies.

``get_current_user`` (from ``beautyplaza.auth``) yields the token subject;
the helpers here turn it into a loaded, active ``User`` and a ``Principal``
the authorization policy can reason about.
"""

import asyncio
import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...core.exceptions import NotFoundException
from ...models.user import User
from ...services.auth_service import AuthService
from ...services.technician_service import TechnicianService
from .authz import Principal
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_active_user(
    current_user_email: str = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user.

    Raises:
        HTTPException: 401 if the user no longer exists, 403 if inactive
    """
    try:
        user = await asyncio.to_thread(AuthService(db).get_current_user, current_user_email)
    except NotFoundException:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        logger.warning("Inactive user attempted access: %s", user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return user


async def get_principal(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> Principal:
    """Build the principal, including the technician profile linked to the user."""
    technician_id = None
    if current_user.is_technician:
        technician = await asyncio.to_thread(TechnicianService(db).find_by_user, current_user.id)
        technician_id = technician.id if technician else None
    return Principal(user_id=current_user.id, role=current_user.role, technician_id=technician_id)
