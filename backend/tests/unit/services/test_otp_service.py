"""Tests for OtpService."""

from datetime import datetime, timezone
import logging
from unittest.mock import Mock

import pytest

from beautyplaza.core.exceptions import ValidationException
from beautyplaza.core.otp_store import ConsumeResult, InMemoryOtpStore
from beautyplaza.services.otp_service import OtpService, mask_address, normalize_address


class Clock:
    def __init__(self) -> None:
        self.now = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def delivery() -> Mock:
    return Mock()


@pytest.fixture
def service(clock, delivery) -> OtpService:
    return OtpService(
        InMemoryOtpStore(),
        delivery=delivery,
        ttl_seconds=300,
        max_attempts=3,
        code_length=6,
        clock=clock,
    )


def test_issue_generates_numeric_code_of_configured_length(service, delivery) -> None:
    challenge = service.issue("Carol@Example.com ")

    assert challenge.address == "carol@example.com"
    assert len(challenge.code) == 6
    assert challenge.code.isdigit()
    delivery.deliver.assert_called_once_with(
        "carol@example.com", challenge.code, challenge.expires_at
    )


def test_issue_requires_an_address(service) -> None:
    with pytest.raises(ValidationException) as exc_info:
        service.issue("   ")

    assert exc_info.value.code == "OTP_ADDRESS_REQUIRED"


def test_validate_is_single_use(service) -> None:
    challenge = service.issue("carol@example.com")

    assert service.validate("carol@example.com", challenge.code) is True
    assert service.validate("carol@example.com", challenge.code) is False


def test_validate_matches_address_case_insensitively(service) -> None:
    challenge = service.issue("carol@example.com")

    assert service.validate("CAROL@example.com", challenge.code) is True


def test_code_expires_after_ttl(service, clock) -> None:
    challenge = service.issue("carol@example.com")
    clock.now = clock.now.replace(minute=6)

    assert service.verify("carol@example.com", challenge.code) == ConsumeResult.EXPIRED


def test_missing_code_is_rejected_without_consuming(service) -> None:
    challenge = service.issue("carol@example.com")

    assert service.verify("carol@example.com", "") == ConsumeResult.MISSING
    assert service.validate("carol@example.com", challenge.code) is True


def test_too_many_wrong_codes_discard_the_challenge(service) -> None:
    challenge = service.issue("carol@example.com")

    assert service.verify("carol@example.com", "x1") == ConsumeResult.MISMATCH
    assert service.verify("carol@example.com", "x2") == ConsumeResult.MISMATCH
    assert service.verify("carol@example.com", "x3") == ConsumeResult.LOCKED
    assert service.validate("carol@example.com", challenge.code) is False


def test_reissue_invalidates_previous_code(clock) -> None:
    codes = iter(["111111", "222222"])
    service = OtpService(
        InMemoryOtpStore(), ttl_seconds=300, clock=clock, code_factory=lambda n: next(codes)
    )

    service.issue("carol@example.com")
    service.issue("carol@example.com")

    assert service.validate("carol@example.com", "111111") is False
    assert service.validate("carol@example.com", "222222") is True


def test_default_delivery_never_logs_code_at_info(clock, caplog) -> None:
    service = OtpService(InMemoryOtpStore(), clock=clock, code_factory=lambda n: "424242")

    with caplog.at_level(logging.INFO):
        service.issue("carol@example.com")

    info_text = " ".join(r.getMessage() for r in caplog.records if r.levelno >= logging.INFO)
    assert "424242" not in info_text
    assert "carol@example.com" not in info_text


def test_mask_and_normalize_address() -> None:
    assert normalize_address("  Carol@Example.COM ") == "carol@example.com"
    assert normalize_address(None) == ""
    assert "carol" not in mask_address("carol@example.com")
