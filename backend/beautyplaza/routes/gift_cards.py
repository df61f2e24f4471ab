# backend/beautyplaza/routes/gift_cards.py
"""
Gift card routes.
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies import (
    Principal,
    enforce,
    get_current_active_user,
    get_gift_card_service,
    get_principal,
)
from ..core.enums import Action
from ..models.user import User
from ..schemas.gift_card import GiftCardIssue, GiftCardRedeem, GiftCardResponse
from ..services.gift_card_service import GiftCardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gift-cards", tags=["gift-cards"])


@router.post("", response_model=GiftCardResponse, status_code=status.HTTP_201_CREATED)
async def issue_gift_card(
    payload: GiftCardIssue,
    current_user: User = Depends(get_current_active_user),
    principal: Principal = Depends(get_principal),
    gift_card_service: GiftCardService = Depends(get_gift_card_service),
) -> GiftCardResponse:
    enforce(principal, Action.ISSUE_GIFT_CARD)
    card = await asyncio.to_thread(gift_card_service.issue, payload, current_user)
    return GiftCardResponse.model_validate(card)


@router.post("/redeem", response_model=GiftCardResponse)
async def redeem_gift_card(
    payload: GiftCardRedeem,
    principal: Principal = Depends(get_principal),
    gift_card_service: GiftCardService = Depends(get_gift_card_service),
) -> GiftCardResponse:
    enforce(principal, Action.REDEEM_GIFT_CARD)
    card = await asyncio.to_thread(gift_card_service.redeem, payload.code, payload.amount)
    return GiftCardResponse.model_validate(card)


@router.get("", response_model=List[GiftCardResponse])
async def list_gift_cards(
    principal: Principal = Depends(get_principal),
    gift_card_service: GiftCardService = Depends(get_gift_card_service),
) -> List[GiftCardResponse]:
    enforce(principal, Action.LIST_GIFT_CARDS)
    cards = await asyncio.to_thread(gift_card_service.list_cards)
    return [GiftCardResponse.model_validate(c) for c in cards]


@router.get("/{code}", response_model=GiftCardResponse)
async def get_gift_card(
    code: str,
    principal: Principal = Depends(get_principal),
    gift_card_service: GiftCardService = Depends(get_gift_card_service),
) -> GiftCardResponse:
    card = await asyncio.to_thread(gift_card_service.get_by_code, code)
    return GiftCardResponse.model_validate(card)
