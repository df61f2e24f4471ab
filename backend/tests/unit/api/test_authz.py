"""Tests for the HTTP authorization policy."""

import pytest

from beautyplaza.api.dependencies.authz import Principal, authorize, enforce
from beautyplaza.core.enums import Action, RoleName
from beautyplaza.core.exceptions import ForbiddenException

ADMIN = Principal(user_id="u-admin", role=RoleName.ADMIN.value)
CAROL = Principal(user_id="u-carol", role=RoleName.CUSTOMER.value)
OSCAR = Principal(user_id="u-oscar", role=RoleName.CUSTOMER.value)
TINA = Principal(user_id="u-tina", role=RoleName.TECHNICIAN.value, technician_id="t-tina")

CAROLS_APPOINTMENT = {"customer_id": "u-carol", "technician_id": "t-tina"}


@pytest.mark.parametrize("action", [a for a in Action if a != Action.VERIFY_APPOINTMENT_OTP])
def test_admin_may_do_everything_else(action) -> None:
    assert authorize(ADMIN, action, CAROLS_APPOINTMENT) is True


def test_admin_cannot_confirm_otp_for_customer() -> None:
    assert authorize(ADMIN, Action.VERIFY_APPOINTMENT_OTP, CAROLS_APPOINTMENT) is False


class TestAppointmentAccess:
    def test_customer_books_only_for_self(self) -> None:
        assert authorize(CAROL, Action.CREATE_APPOINTMENT, {"customer_id": "u-carol"})
        assert not authorize(CAROL, Action.CREATE_APPOINTMENT, {"customer_id": "u-oscar"})

    def test_technician_cannot_book(self) -> None:
        assert not authorize(TINA, Action.CREATE_APPOINTMENT, {"customer_id": "u-tina"})

    def test_view_by_owner_and_assigned_technician(self) -> None:
        assert authorize(CAROL, Action.VIEW_APPOINTMENT, CAROLS_APPOINTMENT)
        assert authorize(TINA, Action.VIEW_APPOINTMENT, CAROLS_APPOINTMENT)
        assert not authorize(OSCAR, Action.VIEW_APPOINTMENT, CAROLS_APPOINTMENT)

    def test_other_technician_cannot_view(self) -> None:
        other = Principal(user_id="u-theo", role=RoleName.TECHNICIAN.value, technician_id="t-theo")

        assert not authorize(other, Action.VIEW_APPOINTMENT, CAROLS_APPOINTMENT)

    def test_technician_without_record_is_never_assigned(self) -> None:
        unlinked = Principal(user_id="u-new", role=RoleName.TECHNICIAN.value)

        assert not authorize(unlinked, Action.UPDATE_APPOINTMENT_STATUS, {"technician_id": None})

    def test_status_changes_by_assigned_technician_only(self) -> None:
        assert authorize(TINA, Action.UPDATE_APPOINTMENT_STATUS, CAROLS_APPOINTMENT)
        assert not authorize(CAROL, Action.UPDATE_APPOINTMENT_STATUS, CAROLS_APPOINTMENT)

    def test_otp_actions_belong_to_customer(self) -> None:
        for action in (Action.VERIFY_APPOINTMENT_OTP, Action.RESEND_APPOINTMENT_OTP):
            assert authorize(CAROL, action, CAROLS_APPOINTMENT)
            assert not authorize(TINA, action, CAROLS_APPOINTMENT)

    @pytest.mark.parametrize(
        "action",
        [Action.UPDATE_APPOINTMENT, Action.DELETE_APPOINTMENT, Action.LIST_ALL_APPOINTMENTS],
    )
    def test_admin_only_actions(self, action) -> None:
        assert not authorize(CAROL, action, CAROLS_APPOINTMENT)
        assert not authorize(TINA, action, CAROLS_APPOINTMENT)

    def test_slots_open_to_everyone(self) -> None:
        assert authorize(OSCAR, Action.VIEW_AVAILABLE_SLOTS)


def test_loyalty_visible_to_owner_only() -> None:
    assert authorize(CAROL, Action.VIEW_LOYALTY, {"user_id": "u-carol"})
    assert not authorize(OSCAR, Action.VIEW_LOYALTY, {"user_id": "u-carol"})


def test_missing_resource_denies_ownership_rules() -> None:
    assert not authorize(CAROL, Action.VIEW_APPOINTMENT, None)


def test_enforce_raises_forbidden() -> None:
    with pytest.raises(ForbiddenException) as exc_info:
        enforce(OSCAR, Action.VIEW_APPOINTMENT, CAROLS_APPOINTMENT)

    assert exc_info.value.code == "FORBIDDEN"


def test_enforce_passes_silently_when_allowed() -> None:
    enforce(CAROL, Action.VIEW_APPOINTMENT, CAROLS_APPOINTMENT)
