import pytest

from beautyplaza.core.exceptions import ConflictException, NotFoundException, ValidationException
from beautyplaza.models.referral import ReferralStatus
from beautyplaza.schemas.referral import ReferralGenerate
from beautyplaza.services.referral_service import ReferralService, generate_referral_code


@pytest.fixture
def service(db) -> ReferralService:
    return ReferralService(db)


def test_generated_code_shape() -> None:
    code = generate_referral_code()

    assert len(code) == 8
    assert code == code.upper()


class TestGenerate:
    def test_generates_pending_referral_for_caller(self, service, customer_user) -> None:
        referral = service.generate(
            ReferralGenerate(referred_user_email="Friend@Example.com"), customer_user
        )

        assert referral.referrer_user_id == customer_user.id
        assert referral.referred_user_email == "friend@example.com"
        assert referral.status == ReferralStatus.PENDING.value

    def test_non_admin_cannot_generate_for_someone_else(
        self, service, customer_user, other_customer
    ) -> None:
        referral = service.generate(
            ReferralGenerate(referrer_user_id=other_customer.id), customer_user
        )

        assert referral.referrer_user_id == customer_user.id

    def test_admin_generates_on_behalf(self, service, admin_user, customer_user) -> None:
        referral = service.generate(
            ReferralGenerate(referrer_user_id=customer_user.id), admin_user
        )

        assert referral.referrer_user_id == customer_user.id


class TestComplete:
    def test_complete(self, service, customer_user, other_customer) -> None:
        referral = service.generate(ReferralGenerate(), customer_user)

        completed = service.complete(referral.referral_code.lower(), other_customer.id)

        assert completed.status == ReferralStatus.COMPLETED.value
        assert completed.referred_user_id == other_customer.id
        assert completed.completed_at is not None

    def test_complete_twice_conflicts(self, service, customer_user, other_customer) -> None:
        referral = service.generate(ReferralGenerate(), customer_user)
        service.complete(referral.referral_code, other_customer.id)

        with pytest.raises(ConflictException) as exc_info:
            service.complete(referral.referral_code, other_customer.id)

        assert exc_info.value.message == "Referral already completed."

    def test_cancelled_referral(self, service, db, customer_user, other_customer) -> None:
        referral = service.generate(ReferralGenerate(), customer_user)
        referral.status = ReferralStatus.CANCELLED.value
        db.commit()

        with pytest.raises(ValidationException) as exc_info:
            service.complete(referral.referral_code, other_customer.id)

        assert exc_info.value.message == "Referral has been cancelled."

    def test_self_referral_rejected(self, service, customer_user) -> None:
        referral = service.generate(ReferralGenerate(), customer_user)

        with pytest.raises(ValidationException) as exc_info:
            service.complete(referral.referral_code, customer_user.id)

        assert exc_info.value.code == "SELF_REFERRAL"
        assert service.get_by_code(referral.referral_code).status == ReferralStatus.PENDING.value

    def test_unknown_code(self, service, customer_user) -> None:
        with pytest.raises(NotFoundException):
            service.complete("NOPE1234", customer_user.id)

    def test_unknown_referred_user(self, service, customer_user) -> None:
        referral = service.generate(ReferralGenerate(), customer_user)

        with pytest.raises(NotFoundException):
            service.complete(referral.referral_code, "missing")
