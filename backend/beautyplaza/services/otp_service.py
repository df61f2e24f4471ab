# backend/beautyplaza/services/otp_service.py
"""
OTP Service for the Beauty Plaza platform.

Issues short numeric codes per contact address and validates them exactly
once. Challenges live in an ``OtpStore`` (in-memory or Redis) and delivery is
delegated to a pluggable hook; the default hook only logs.
"""

from datetime import datetime, timezone
import logging
import secrets
from typing import Callable, Optional, Protocol

from ..core.config import settings
from ..core.exceptions import ValidationException
from ..core.otp_store import ConsumeResult, InMemoryOtpStore, OtpChallenge, OtpStore
from ..monitoring.prometheus_metrics import prometheus_metrics
from .base import BaseService

logger = logging.getLogger(__name__)


def mask_address(address: str) -> str:
    """j***@example.com style masking for logs."""
    local, sep, domain = address.partition("@")
    if not sep:
        return f"{address[:1]}***"
    return f"{local[:1]}***@{domain}"


def normalize_address(address: Optional[str]) -> str:
    return (address or "").strip().lower()


class OtpDelivery(Protocol):
    """Hook that gets an issued code to the customer."""

    def deliver(self, address: str, code: str, expires_at: datetime) -> None: ...


class LoggingOtpDelivery:
    """Default delivery: record the issuance; the code itself only at DEBUG."""

    def deliver(self, address: str, code: str, expires_at: datetime) -> None:
        masked = mask_address(address)
        logger.info(f"OTP issued for {masked}, expires at {expires_at.isoformat()}")
        logger.debug(f"OTP code for {masked}: {code}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OtpService:
    """
    Issues and validates one-time codes.

    Collaborators are injectable so tests can control time and code values.
    """

    def __init__(
        self,
        store: Optional[OtpStore] = None,
        *,
        delivery: Optional[OtpDelivery] = None,
        ttl_seconds: Optional[int] = None,
        max_attempts: Optional[int] = None,
        code_length: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        code_factory: Optional[Callable[[int], str]] = None,
    ):
        self.store = store or InMemoryOtpStore()
        self.delivery = delivery or LoggingOtpDelivery()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.otp_ttl_seconds
        self.max_attempts = max_attempts if max_attempts is not None else settings.otp_max_attempts
        self.code_length = code_length or settings.otp_length
        self.clock = clock or _utcnow
        self.code_factory = code_factory or self._random_code
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _random_code(length: int) -> str:
        return f"{secrets.randbelow(10**length):0{length}d}"

    @BaseService.measure_operation("issue_otp")
    def issue(self, address: Optional[str]) -> OtpChallenge:
        """
        Issue a fresh challenge for an address, replacing any outstanding one.

        Raises:
            ValidationException: If no contact address is available
        """
        normalized = normalize_address(address)
        if not normalized:
            raise ValidationException(
                "A contact email is required to send a confirmation code.",
                code="OTP_ADDRESS_REQUIRED",
            )

        challenge = OtpChallenge.issue(
            address=normalized,
            code=self.code_factory(self.code_length),
            issued_at=self.clock(),
            ttl_seconds=self.ttl_seconds,
        )
        self.store.save(challenge)
        self.delivery.deliver(challenge.address, challenge.code, challenge.expires_at)
        prometheus_metrics.record_otp_event("issued")
        return challenge

    @BaseService.measure_operation("verify_otp")
    def verify(self, address: Optional[str], code: Optional[str]) -> ConsumeResult:
        """Present a code and report the detailed outcome."""
        normalized = normalize_address(address)
        presented = (code or "").strip()
        if not normalized or not presented:
            outcome = ConsumeResult.MISSING
        else:
            outcome = self.store.consume(normalized, presented, self.clock(), self.max_attempts)

        prometheus_metrics.record_otp_event(outcome.value)
        if outcome == ConsumeResult.LOCKED:
            self.logger.warning(
                f"OTP challenge for {mask_address(normalized)} discarded after "
                f"{self.max_attempts} failed attempts"
            )
        elif outcome != ConsumeResult.VERIFIED:
            self.logger.info(f"OTP rejected for {mask_address(normalized)}: {outcome.value}")
        return outcome

    def validate(self, address: Optional[str], code: Optional[str]) -> bool:
        """True only for a matching, unexpired, unused code."""
        return self.verify(address, code) == ConsumeResult.VERIFIED

    def pending(self, address: Optional[str]) -> Optional[OtpChallenge]:
        normalized = normalize_address(address)
        return self.store.get(normalized) if normalized else None

    def reinstate(self, address: Optional[str], previous: Optional[OtpChallenge]) -> None:
        """
        Put back the challenge an address had before a failed booking step.

        With no previous challenge the address is left without one.
        """
        normalized = normalize_address(address)
        if not normalized:
            return
        if previous is None:
            self.store.discard(normalized)
        else:
            self.store.save(previous)
        self.logger.info(f"OTP challenge for {mask_address(normalized)} reinstated")
