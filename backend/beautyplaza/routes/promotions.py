# backend/beautyplaza/routes/promotions.py
"""
Promotion routes.

Endpoints:
    GET /active - Promotions usable today
    GET /all - Every promotion (admin)
    GET /code/{promo_code} - Look up by code
    POST /apply - Quote an appointment with a code applied
    POST / - Create (admin)
    GET /{promotion_id} - Look up by id
    PUT /{promotion_id} - Update (admin)
    DELETE /{promotion_id} - Delete (admin)
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..api.dependencies import Principal, enforce, get_principal, get_promotion_service
from ..core.enums import Action
from ..schemas.promotion import (
    PromotionApplyRequest,
    PromotionCreate,
    PromotionQuote,
    PromotionResponse,
    PromotionUpdate,
)
from ..services.promotion_service import PromotionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.get("/active", response_model=List[PromotionResponse])
async def list_active_promotions(
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> List[PromotionResponse]:
    enforce(principal, Action.VIEW_CATALOG)
    promotions = await asyncio.to_thread(promotion_service.list_active)
    return [PromotionResponse.model_validate(p) for p in promotions]


@router.get("/all", response_model=List[PromotionResponse])
async def list_all_promotions(
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> List[PromotionResponse]:
    enforce(principal, Action.MANAGE_PROMOTIONS)
    promotions = await asyncio.to_thread(promotion_service.list_promotions)
    return [PromotionResponse.model_validate(p) for p in promotions]


@router.get("/code/{promo_code}", response_model=PromotionResponse)
async def get_promotion_by_code(
    promo_code: str,
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> PromotionResponse:
    enforce(principal, Action.VIEW_CATALOG)
    promotion = await asyncio.to_thread(promotion_service.get_by_code, promo_code)
    return PromotionResponse.model_validate(promotion)


@router.post("/apply", response_model=PromotionQuote)
async def apply_promotion(
    payload: PromotionApplyRequest,
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> PromotionQuote:
    """Quote only; the appointment keeps its amount."""
    enforce(principal, Action.APPLY_PROMOTION)
    quote = await asyncio.to_thread(
        promotion_service.apply, payload.promo_code, payload.appointment_id
    )
    return PromotionQuote(**quote)


@router.post("", response_model=PromotionResponse, status_code=status.HTTP_201_CREATED)
async def create_promotion(
    payload: PromotionCreate,
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> PromotionResponse:
    enforce(principal, Action.MANAGE_PROMOTIONS)
    promotion = await asyncio.to_thread(promotion_service.create_promotion, payload)
    return PromotionResponse.model_validate(promotion)


@router.get("/{promotion_id}", response_model=PromotionResponse)
async def get_promotion(
    promotion_id: str,
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> PromotionResponse:
    enforce(principal, Action.VIEW_CATALOG)
    promotion = await asyncio.to_thread(promotion_service.get_promotion, promotion_id)
    return PromotionResponse.model_validate(promotion)


@router.put("/{promotion_id}", response_model=PromotionResponse)
async def update_promotion(
    promotion_id: str,
    payload: PromotionUpdate,
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> PromotionResponse:
    enforce(principal, Action.MANAGE_PROMOTIONS)
    promotion = await asyncio.to_thread(
        promotion_service.update_promotion, promotion_id, payload
    )
    return PromotionResponse.model_validate(promotion)


@router.delete("/{promotion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promotion(
    promotion_id: str,
    principal: Principal = Depends(get_principal),
    promotion_service: PromotionService = Depends(get_promotion_service),
) -> Response:
    enforce(principal, Action.MANAGE_PROMOTIONS)
    await asyncio.to_thread(promotion_service.delete_promotion, promotion_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
