# backend/beautyplaza/services/promotion_service.py
"""
Promotion Service for the Beauty Plaza platform.

Promotions are discount codes, either a percentage (0-100) or a fixed
amount. Applying one to an appointment only quotes the discounted price;
the appointment itself is left unchanged.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..models.promotion import DiscountType, Promotion
from ..repositories.appointment_repository import AppointmentRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.promotion_repository import PromotionRepository
from ..schemas.promotion import PromotionCreate, PromotionUpdate
from .base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def compute_discount(discount_type: str, discount_value: Decimal, amount: Decimal) -> Decimal:
    """Discount for an amount, never more than the amount itself."""
    if discount_type == DiscountType.PERCENTAGE.value:
        discount = amount * Decimal(discount_value) / Decimal(100)
    else:
        discount = Decimal(discount_value)
    return min(discount, amount).quantize(CENTS, rounding=ROUND_HALF_UP)


class PromotionService(BaseService):
    def __init__(
        self,
        db: Session,
        repository: Optional[PromotionRepository] = None,
        appointment_repository: Optional[AppointmentRepository] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_promotion_repository(db)
        self.appointment_repository = (
            appointment_repository or RepositoryFactory.create_appointment_repository(db)
        )
        self.today = today or date.today

    def _get_or_404(self, promotion_id: str) -> Promotion:
        promotion = self.repository.get_by_id(promotion_id)
        if not promotion:
            raise NotFoundException.for_resource("Promotion", "id", promotion_id)
        return promotion

    def _ensure_code_free(self, promo_code: str, promotion_id: Optional[str] = None) -> None:
        existing = self.repository.get_by_code(promo_code)
        if existing and existing.id != promotion_id:
            raise ConflictException(
                f"Promotion code already exists: '{promo_code}'", code="PROMOTION_CODE_TAKEN"
            )

    @BaseService.measure_operation("list_promotions")
    def list_promotions(self) -> List[Promotion]:
        return self.repository.list_promotions()

    @BaseService.measure_operation("list_active_promotions")
    def list_active(self) -> List[Promotion]:
        return self.repository.list_active(self.today())

    @BaseService.measure_operation("get_promotion")
    def get_promotion(self, promotion_id: str) -> Promotion:
        return self._get_or_404(promotion_id)

    @BaseService.measure_operation("get_promotion_by_code")
    def get_by_code(self, promo_code: str) -> Promotion:
        promotion = self.repository.get_by_code(promo_code)
        if not promotion:
            raise NotFoundException.for_resource("Promotion", "code", promo_code.strip().upper())
        return promotion

    @BaseService.measure_operation("create_promotion")
    def create_promotion(self, data: PromotionCreate) -> Promotion:
        values = data.model_dump()
        values["promo_code"] = data.promo_code.strip().upper()
        values["discount_type"] = data.discount_type.value
        self._ensure_code_free(values["promo_code"])

        with self.transaction():
            promotion = self.repository.create(**values)
        self.log_operation("create_promotion", promotion_id=promotion.id)
        return promotion

    @BaseService.measure_operation("update_promotion")
    def update_promotion(self, promotion_id: str, data: PromotionUpdate) -> Promotion:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "promo_code" in changes:
            changes["promo_code"] = changes["promo_code"].strip().upper()
        if "discount_type" in changes:
            changes["discount_type"] = DiscountType(changes["discount_type"]).value

        with self.transaction():
            promotion = self._get_or_404(promotion_id)
            if "promo_code" in changes:
                self._ensure_code_free(changes["promo_code"], promotion_id)

            discount_type = changes.get("discount_type", promotion.discount_type)
            discount_value = Decimal(changes.get("discount_value", promotion.discount_value))
            if discount_type == DiscountType.PERCENTAGE.value and discount_value > 100:
                raise ValidationException(
                    "Percentage discount cannot exceed 100", code="INVALID_DISCOUNT"
                )
            start = changes.get("start_date", promotion.start_date)
            end = changes.get("end_date", promotion.end_date)
            if start and end and end < start:
                raise ValidationException(
                    "end_date must not be before start_date", code="INVALID_DATE_RANGE"
                )

            for field, value in changes.items():
                setattr(promotion, field, value)
            self.repository.flush()

        self.log_operation("update_promotion", promotion_id=promotion_id, fields=sorted(changes))
        return promotion

    @BaseService.measure_operation("delete_promotion")
    def delete_promotion(self, promotion_id: str) -> None:
        with self.transaction():
            if not self.repository.delete(promotion_id):
                raise NotFoundException.for_resource("Promotion", "id", promotion_id)
        self.log_operation("delete_promotion", promotion_id=promotion_id)

    @BaseService.measure_operation("apply_promotion")
    def apply(self, promo_code: str, appointment_id: str) -> Dict[str, object]:
        """
        Quote the price of an appointment with a promotion applied.

        Raises:
            ValidationException: Unknown, inactive, expired or not-yet-started code
            NotFoundException: If the appointment does not exist
        """
        promotion = self.repository.get_by_code(promo_code)
        if not promotion or not promotion.is_active:
            raise ValidationException(
                "Invalid or inactive promotion code.", code="PROMOTION_INVALID"
            )

        today = self.today()
        if promotion.end_date and promotion.end_date < today:
            raise ValidationException("Promotion has expired.", code="PROMOTION_EXPIRED")
        if promotion.start_date and promotion.start_date > today:
            raise ValidationException("Promotion is not active yet.", code="PROMOTION_NOT_STARTED")

        appointment = self.appointment_repository.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundException.for_resource("Appointment", "id", appointment_id)

        original = Decimal(appointment.total_amount)
        discount = compute_discount(promotion.discount_type, promotion.discount_value, original)
        return {
            "promo_code": promotion.promo_code,
            "appointment_id": appointment.id,
            "original_amount": original,
            "discount_amount": discount,
            "discounted_amount": original - discount,
        }
