# backend/beautyplaza/api/dependencies/__init__.py
"""
FastAPI dependencies, re-exported for route modules.
"""

from .auth import get_current_active_user, get_principal
from .authz import Principal, authorize, enforce
from .database import get_db
from .services import (
    get_appointment_service,
    get_auth_service,
    get_catalog_service,
    get_gift_card_service,
    get_loyalty_service,
    get_otp_service,
    get_promotion_service,
    get_referral_service,
    get_settings_service,
    get_technician_service,
    get_user_service,
)

__all__ = [
    "Principal",
    "authorize",
    "enforce",
    "get_appointment_service",
    "get_auth_service",
    "get_catalog_service",
    "get_current_active_user",
    "get_db",
    "get_gift_card_service",
    "get_loyalty_service",
    "get_otp_service",
    "get_principal",
    "get_promotion_service",
    "get_referral_service",
    "get_settings_service",
    "get_technician_service",
    "get_user_service",
]
