# backend/beautyplaza/routes/referrals.py
"""Referral program routes."""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies import (
    Principal,
    enforce,
    get_current_active_user,
    get_principal,
    get_referral_service,
)
from ..core.enums import Action
from ..models.user import User
from ..schemas.referral import ReferralComplete, ReferralGenerate, ReferralResponse
from ..services.referral_service import ReferralService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/referrals", tags=["referrals"])


@router.post("/generate", response_model=ReferralResponse, status_code=status.HTTP_201_CREATED)
async def generate_referral(
    payload: ReferralGenerate,
    current_user: User = Depends(get_current_active_user),
    principal: Principal = Depends(get_principal),
    referral_service: ReferralService = Depends(get_referral_service),
) -> ReferralResponse:
    enforce(principal, Action.GENERATE_REFERRAL)
    referral = await asyncio.to_thread(referral_service.generate, payload, current_user)
    return ReferralResponse.model_validate(referral)


@router.get("", response_model=List[ReferralResponse])
async def list_referrals(
    principal: Principal = Depends(get_principal),
    referral_service: ReferralService = Depends(get_referral_service),
) -> List[ReferralResponse]:
    enforce(principal, Action.LIST_REFERRALS)
    referrals = await asyncio.to_thread(referral_service.list_referrals)
    return [ReferralResponse.model_validate(r) for r in referrals]


@router.get("/{referral_code}", response_model=ReferralResponse)
async def get_referral(
    referral_code: str,
    principal: Principal = Depends(get_principal),
    referral_service: ReferralService = Depends(get_referral_service),
) -> ReferralResponse:
    referral = await asyncio.to_thread(referral_service.get_by_code, referral_code)
    return ReferralResponse.model_validate(referral)


@router.post("/{referral_code}/complete", response_model=ReferralResponse)
async def complete_referral(
    referral_code: str,
    payload: ReferralComplete,
    principal: Principal = Depends(get_principal),
    referral_service: ReferralService = Depends(get_referral_service),
) -> ReferralResponse:
    enforce(principal, Action.COMPLETE_REFERRAL)
    referral = await asyncio.to_thread(
        referral_service.complete, referral_code, payload.referred_user_id
    )
    return ReferralResponse.model_validate(referral)
