# backend/beautyplaza/services/loyalty_service.py
"""
Loyalty Points Service for the Beauty Plaza platform.

Maintains the points ledger:
- EARNED entries add points (never negative)
- REDEEMED entries spend points and record how they were paid out
  (gift card or bank credit)

A user's balance is the sum of EARNED points minus REDEEMED points.
"""

from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import NotFoundException, ValidationException
from ..models.loyalty import LoyaltyTransaction, RedemptionMethod, TransactionType
from ..repositories.appointment_repository import AppointmentRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.loyalty_repository import LoyaltyRepository
from ..repositories.user_repository import UserRepository
from ..schemas.loyalty import LoyaltyTransactionCreate, LoyaltyTransactionUpdate
from .base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

_REDEMPTION_COLUMNS = ("redemption_method", "bank_account", "routing_number", "redemption_value")


class LoyaltyService(BaseService):
    """Service for the loyalty points ledger."""

    def __init__(
        self,
        db: Session,
        repository: Optional[LoyaltyRepository] = None,
        user_repository: Optional[UserRepository] = None,
        appointment_repository: Optional[AppointmentRepository] = None,
        point_value: Optional[float] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_loyalty_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.appointment_repository = (
            appointment_repository or RepositoryFactory.create_appointment_repository(db)
        )
        self.point_value = Decimal(
            str(point_value if point_value is not None else settings.loyalty_point_value)
        )

    def _ensure_user(self, user_id: str) -> None:
        if not self.user_repository.get_by_id(user_id):
            raise NotFoundException.for_resource("User", "id", user_id)

    def points_to_value(self, points: int) -> Decimal:
        return (Decimal(points) * self.point_value).quantize(CENTS, rounding=ROUND_HALF_UP)

    @staticmethod
    def _parse_type(raw: str) -> TransactionType:
        try:
            return TransactionType(raw.strip().upper())
        except ValueError:
            raise ValidationException(
                f"Invalid transaction type: {raw}", code="INVALID_TRANSACTION_TYPE"
            )

    @staticmethod
    def _parse_method(raw: Optional[str]) -> RedemptionMethod:
        if not raw:
            raise ValidationException(
                "Redemption method is mandatory for REDEEMED transactions.",
                code="REDEMPTION_METHOD_REQUIRED",
            )
        try:
            return RedemptionMethod(raw.strip().upper())
        except ValueError:
            raise ValidationException(
                f"Invalid redemption method: {raw}", code="INVALID_REDEMPTION_METHOD"
            )

    def _ensure_appointment(self, appointment_id: Optional[str]) -> None:
        if appointment_id and not self.appointment_repository.get_by_id(appointment_id):
            raise NotFoundException.for_resource("Appointment", "id", appointment_id)

    def _ensure_covered(self, user_id: str, points: int) -> None:
        balance = self.repository.get_balance(user_id)
        if balance < points:
            raise ValidationException(
                "Insufficient loyalty points for redemption.",
                code="INSUFFICIENT_POINTS",
                details={"balance": balance, "requested": points},
            )

    def _entry_fields(
        self,
        transaction_type: TransactionType,
        points: int,
        redemption_method: Optional[str],
        bank_account: Optional[str],
        routing_number: Optional[str],
        redemption_value: Optional[Decimal],
    ) -> Dict[str, Any]:
        """Validate points and redemption details; returns the redemption columns."""
        if transaction_type == TransactionType.EARNED:
            if points < 0:
                raise ValidationException(
                    "Earned points cannot be negative.", code="INVALID_POINTS"
                )
            return dict.fromkeys(_REDEMPTION_COLUMNS)

        if points <= 0:
            raise ValidationException("Redemption points must be positive.", code="INVALID_POINTS")
        method = self._parse_method(redemption_method)
        bank_credit = method == RedemptionMethod.BANK_CREDIT
        if bank_credit and not (bank_account and routing_number):
            raise ValidationException(
                "Bank account and routing number are required for bank credit redemption.",
                code="BANK_DETAILS_REQUIRED",
            )
        return {
            "redemption_method": method.value,
            "bank_account": bank_account if bank_credit else None,
            "routing_number": routing_number if bank_credit else None,
            "redemption_value": (
                redemption_value if redemption_value is not None else self.points_to_value(points)
            ),
        }

    @BaseService.measure_operation("record_loyalty_transaction")
    def record_transaction(self, data: LoyaltyTransactionCreate) -> LoyaltyTransaction:
        """
        Append an EARNED or REDEEMED entry to a user's ledger.

        Raises:
            ValidationException: For an unknown type or method, bad points, missing
                bank details, or a redemption the balance cannot cover
            NotFoundException: If the user or referenced appointment does not exist
        """
        transaction_type = self._parse_type(data.transaction_type)

        with self.transaction():
            self._ensure_user(data.user_id)
            self._ensure_appointment(data.appointment_id)
            values = {
                "user_id": data.user_id,
                "transaction_type": transaction_type.value,
                "points": data.points,
                "description": data.description,
                "appointment_id": data.appointment_id,
                **self._entry_fields(
                    transaction_type,
                    data.points,
                    data.redemption_method,
                    data.bank_account,
                    data.routing_number,
                    data.redemption_value,
                ),
            }
            if transaction_type == TransactionType.REDEEMED:
                self._ensure_covered(data.user_id, data.points)
            transaction = self.repository.create(**values)

        self.log_operation(
            "record_loyalty_transaction",
            user_id=data.user_id,
            transaction_type=transaction_type.value,
            points=data.points,
        )
        return transaction

    @BaseService.measure_operation("update_loyalty_transaction")
    def update_transaction(
        self, transaction_id: str, data: LoyaltyTransactionUpdate
    ) -> LoyaltyTransaction:
        """
        Correct an existing ledger entry (admin).

        The merged entry goes through the same checks as a new one, and no
        balance it touches (old or new owner) may drop below zero.
        """
        changes = data.model_dump(exclude_unset=True)

        with self.transaction():
            transaction = self._get_or_404(transaction_id)

            def merged(field: str) -> Any:
                value = changes.get(field)
                return value if value is not None else getattr(transaction, field)

            previous_owner = transaction.user_id
            owner = merged("user_id")
            if owner != previous_owner:
                self._ensure_user(owner)
            if "appointment_id" in changes:
                self._ensure_appointment(changes["appointment_id"])
                transaction.appointment_id = changes["appointment_id"]

            raw_type = changes.get("transaction_type")
            if raw_type:
                transaction_type = self._parse_type(raw_type)
            else:
                transaction_type = TransactionType(transaction.transaction_type)
            points = merged("points")
            redemption_value = changes.get("redemption_value")
            if (
                redemption_value is None
                and points == transaction.points
                and transaction_type.value == transaction.transaction_type
            ):
                redemption_value = transaction.redemption_value

            fields = self._entry_fields(
                transaction_type,
                points,
                merged("redemption_method"),
                merged("bank_account"),
                merged("routing_number"),
                redemption_value,
            )

            transaction.user_id = owner
            transaction.transaction_type = transaction_type.value
            transaction.points = points
            transaction.description = merged("description")
            for column, value in fields.items():
                setattr(transaction, column, value)
            self.repository.flush()

            for user_id in {previous_owner, owner}:
                self._ensure_covered(user_id, 0)

        self.log_operation(
            "update_loyalty_transaction",
            transaction_id=transaction_id,
            fields=sorted(changes),
        )
        self.repository.refresh(transaction)
        return transaction

    def _get_or_404(self, transaction_id: str) -> LoyaltyTransaction:
        transaction = self.repository.get_by_id(transaction_id)
        if not transaction:
            raise NotFoundException.for_resource("Loyalty transaction", "id", transaction_id)
        return transaction

    @BaseService.measure_operation("get_loyalty_transaction")
    def get_transaction(self, transaction_id: str) -> LoyaltyTransaction:
        return self._get_or_404(transaction_id)

    @BaseService.measure_operation("list_loyalty_transactions")
    def list_transactions(self) -> List[LoyaltyTransaction]:
        return self.repository.list_transactions()

    @BaseService.measure_operation("list_user_loyalty_transactions")
    def list_for_user(self, user_id: str) -> List[LoyaltyTransaction]:
        self._ensure_user(user_id)
        return self.repository.list_for_user(user_id)

    @BaseService.measure_operation("get_loyalty_balance")
    def get_balance(self, user_id: str) -> int:
        self._ensure_user(user_id)
        return self.repository.get_balance(user_id)

    @BaseService.measure_operation("delete_loyalty_transaction")
    def delete_transaction(self, transaction_id: str) -> None:
        with self.transaction():
            if not self.repository.delete(transaction_id):
                raise NotFoundException.for_resource("Loyalty transaction", "id", transaction_id)
        self.log_operation("delete_loyalty_transaction", transaction_id=transaction_id)
