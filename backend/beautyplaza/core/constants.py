"""Application-wide constants for the Beauty Plaza platform."""

from __future__ import annotations

from .. import __version__

BRAND_NAME = "Beauty Plaza"
API_TITLE = f"{BRAND_NAME} API"
API_VERSION = __version__
API_DESCRIPTION = (
    "Salon and spa management backend: accounts, service catalog, technician roster, "
    "OTP-confirmed appointment booking, loyalty points, gift cards, promotions and referrals."
)

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 1000

# Appointment validation
PHONE_PATTERN = r"^[0-9]{10}$"
MIN_PASSWORD_LENGTH = 6
MAX_NOTES_LENGTH = 2000

# Code formats
GIFT_CARD_CODE_LENGTH = 12
REFERRAL_CODE_LENGTH = 8

# Frontend URLs
DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

# Error messages
ERROR_USER_NOT_FOUND = "User not found"
ERROR_INVALID_CREDENTIALS = "Invalid email or password"
ERROR_INVALID_OTP = "Invalid or expired OTP."
ERROR_TECHNICIAN_UNAVAILABLE = "Technician is not available for bookings."
ERROR_SLOT_TAKEN = "Technician already has an appointment at this date and time."
ERROR_SLOT_TAKEN_ON_UPDATE = "Technician already has an appointment at this updated date and time."
