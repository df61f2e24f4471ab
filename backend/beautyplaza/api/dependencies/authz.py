# backend/beautyplaza/api/dependencies/authz.py
"""
Authorization policy for the HTTP boundary.

``authorize(principal, action, resource)`` is a pure decision function.
Routes call ``enforce`` with the loaded resource (an ORM object or a dict
carrying ``customer_id`` / ``technician_id`` / ``user_id``) once they have
it. Admins may do everything except confirm a customer's OTP on their
behalf.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Optional

from ...core.enums import Action, RoleName
from ...core.exceptions import ForbiddenException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    user_id: str
    role: str
    technician_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value


def _attr(resource: Any, name: str) -> Optional[str]:
    if resource is None:
        return None
    if isinstance(resource, dict):
        return resource.get(name)
    return getattr(resource, name, None)


def _is_customer_owner(principal: Principal, resource: Any) -> bool:
    owner = _attr(resource, "customer_id")
    return owner is not None and owner == principal.user_id


def _is_assigned_technician(principal: Principal, resource: Any) -> bool:
    technician_id = _attr(resource, "technician_id")
    return (
        principal.technician_id is not None
        and technician_id is not None
        and technician_id == principal.technician_id
    )


def _is_self(principal: Principal, resource: Any) -> bool:
    user_id = _attr(resource, "user_id")
    return user_id is not None and user_id == principal.user_id


def _anyone(principal: Principal, resource: Any) -> bool:
    return True


def _nobody(principal: Principal, resource: Any) -> bool:
    return False


Rule = Callable[[Principal, Any], bool]

# Rules for non-admin principals
_RULES: Dict[Action, Rule] = {
    Action.CREATE_APPOINTMENT: lambda p, r: p.role == RoleName.CUSTOMER.value
    and _is_customer_owner(p, r),
    Action.VIEW_APPOINTMENT: lambda p, r: _is_customer_owner(p, r)
    or _is_assigned_technician(p, r),
    Action.LIST_ALL_APPOINTMENTS: _nobody,
    Action.LIST_CUSTOMER_APPOINTMENTS: _is_customer_owner,
    Action.LIST_TECHNICIAN_APPOINTMENTS: _is_assigned_technician,
    Action.LIST_APPOINTMENTS_BY_DATE: _nobody,
    Action.VIEW_AVAILABLE_SLOTS: _anyone,
    Action.UPDATE_APPOINTMENT: _nobody,
    Action.UPDATE_APPOINTMENT_STATUS: _is_assigned_technician,
    Action.VERIFY_APPOINTMENT_OTP: _is_customer_owner,
    Action.RESEND_APPOINTMENT_OTP: _is_customer_owner,
    Action.DELETE_APPOINTMENT: _nobody,
    Action.MANAGE_USERS: _nobody,
    Action.VIEW_CATALOG: _anyone,
    Action.MANAGE_CATALOG: _nobody,
    Action.MANAGE_TECHNICIANS: _nobody,
    Action.MANAGE_SETTINGS: _nobody,
    Action.VIEW_LOYALTY: _is_self,
    Action.MANAGE_LOYALTY: _nobody,
    Action.ISSUE_GIFT_CARD: _anyone,
    Action.REDEEM_GIFT_CARD: _anyone,
    Action.LIST_GIFT_CARDS: _nobody,
    Action.APPLY_PROMOTION: _anyone,
    Action.MANAGE_PROMOTIONS: _nobody,
    Action.GENERATE_REFERRAL: _anyone,
    Action.COMPLETE_REFERRAL: _anyone,
    Action.LIST_REFERRALS: _nobody,
}

# OTP confirmation must come from the customer who holds the code
_OWNER_ONLY = {Action.VERIFY_APPOINTMENT_OTP}


def authorize(principal: Principal, action: Action, resource: Any = None) -> bool:
    """Decide whether ``principal`` may perform ``action`` on ``resource``."""
    if principal.is_admin and action not in _OWNER_ONLY:
        return True
    rule = _RULES.get(action, _nobody)
    return bool(rule(principal, resource))


def enforce(principal: Principal, action: Action, resource: Any = None) -> None:
    """
    Raise ``ForbiddenException`` unless the policy allows the action.
    """
    if not authorize(principal, action, resource):
        logger.info(
            "Authorization denied",
            extra={"user_id": principal.user_id, "role": principal.role, "action": action.value},
        )
        raise ForbiddenException(
            "You do not have permission to perform this action", code="FORBIDDEN"
        )
