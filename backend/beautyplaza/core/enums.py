# backend/beautyplaza/core/enums.py
"""
Core enums for the Beauty Plaza platform.

Role names are stored on the user row; actions are the vocabulary the
authorization policy in ``api.dependencies.authz`` decides on.
"""

from enum import Enum


class RoleName(str, Enum):
    """Roles that ship with the platform."""

    ADMIN = "admin"
    TECHNICIAN = "technician"
    CUSTOMER = "customer"


class Action(str, Enum):
    """Operations the HTTP boundary asks the authorization policy about."""

    # Appointments
    CREATE_APPOINTMENT = "create_appointment"
    VIEW_APPOINTMENT = "view_appointment"
    LIST_ALL_APPOINTMENTS = "list_all_appointments"
    LIST_CUSTOMER_APPOINTMENTS = "list_customer_appointments"
    LIST_TECHNICIAN_APPOINTMENTS = "list_technician_appointments"
    LIST_APPOINTMENTS_BY_DATE = "list_appointments_by_date"
    VIEW_AVAILABLE_SLOTS = "view_available_slots"
    UPDATE_APPOINTMENT = "update_appointment"
    UPDATE_APPOINTMENT_STATUS = "update_appointment_status"
    VERIFY_APPOINTMENT_OTP = "verify_appointment_otp"
    RESEND_APPOINTMENT_OTP = "resend_appointment_otp"
    DELETE_APPOINTMENT = "delete_appointment"

    # Administration
    MANAGE_USERS = "manage_users"
    VIEW_CATALOG = "view_catalog"
    MANAGE_CATALOG = "manage_catalog"
    MANAGE_TECHNICIANS = "manage_technicians"
    MANAGE_SETTINGS = "manage_settings"

    # Loyalty
    VIEW_LOYALTY = "view_loyalty"
    MANAGE_LOYALTY = "manage_loyalty"

    # Gift cards, promotions, referrals
    ISSUE_GIFT_CARD = "issue_gift_card"
    REDEEM_GIFT_CARD = "redeem_gift_card"
    LIST_GIFT_CARDS = "list_gift_cards"
    APPLY_PROMOTION = "apply_promotion"
    MANAGE_PROMOTIONS = "manage_promotions"
    GENERATE_REFERRAL = "generate_referral"
    COMPLETE_REFERRAL = "complete_referral"
    LIST_REFERRALS = "list_referrals"
