# backend/beautyplaza/routes/loyalty_points.py
"""
Loyalty points ledger routes.

Endpoints:
    POST / - Record an EARNED or REDEEMED transaction (admin)
    GET / - All transactions (admin)
    GET /user/{user_id} - A user's transactions (admin or self)
    GET /user/{user_id}/total - A user's balance (admin or self)
    GET /{transaction_id} - One transaction (admin or owner)
    PUT /{transaction_id} - Correct a transaction (admin)
    DELETE /{transaction_id} - Delete a transaction (admin)
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..api.dependencies import Principal, enforce, get_loyalty_service, get_principal
from ..core.enums import Action
from ..schemas.loyalty import (
    LoyaltyBalanceResponse,
    LoyaltyTransactionCreate,
    LoyaltyTransactionResponse,
    LoyaltyTransactionUpdate,
)
from ..services.loyalty_service import LoyaltyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/loyalty-points", tags=["loyalty"])


@router.post("", response_model=LoyaltyTransactionResponse, status_code=status.HTTP_201_CREATED)
async def record_transaction(
    payload: LoyaltyTransactionCreate,
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> LoyaltyTransactionResponse:
    enforce(principal, Action.MANAGE_LOYALTY)
    transaction = await asyncio.to_thread(loyalty_service.record_transaction, payload)
    return LoyaltyTransactionResponse.model_validate(transaction)


@router.get("", response_model=List[LoyaltyTransactionResponse])
async def list_transactions(
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> List[LoyaltyTransactionResponse]:
    enforce(principal, Action.MANAGE_LOYALTY)
    transactions = await asyncio.to_thread(loyalty_service.list_transactions)
    return [LoyaltyTransactionResponse.model_validate(t) for t in transactions]


@router.get("/user/{user_id}", response_model=List[LoyaltyTransactionResponse])
async def list_user_transactions(
    user_id: str,
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> List[LoyaltyTransactionResponse]:
    enforce(principal, Action.VIEW_LOYALTY, {"user_id": user_id})
    transactions = await asyncio.to_thread(loyalty_service.list_for_user, user_id)
    return [LoyaltyTransactionResponse.model_validate(t) for t in transactions]


@router.get("/user/{user_id}/total", response_model=LoyaltyBalanceResponse)
async def get_user_balance(
    user_id: str,
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> LoyaltyBalanceResponse:
    enforce(principal, Action.VIEW_LOYALTY, {"user_id": user_id})
    total = await asyncio.to_thread(loyalty_service.get_balance, user_id)
    return LoyaltyBalanceResponse(
        user_id=user_id,
        total_points=total,
        redemption_value=loyalty_service.points_to_value(total),
    )


@router.get("/{transaction_id}", response_model=LoyaltyTransactionResponse)
async def get_transaction(
    transaction_id: str,
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> LoyaltyTransactionResponse:
    transaction = await asyncio.to_thread(loyalty_service.get_transaction, transaction_id)
    enforce(principal, Action.VIEW_LOYALTY, transaction)
    return LoyaltyTransactionResponse.model_validate(transaction)


@router.put("/{transaction_id}", response_model=LoyaltyTransactionResponse)
async def update_transaction(
    transaction_id: str,
    payload: LoyaltyTransactionUpdate,
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> LoyaltyTransactionResponse:
    enforce(principal, Action.MANAGE_LOYALTY)
    transaction = await asyncio.to_thread(
        loyalty_service.update_transaction, transaction_id, payload
    )
    return LoyaltyTransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    principal: Principal = Depends(get_principal),
    loyalty_service: LoyaltyService = Depends(get_loyalty_service),
) -> Response:
    enforce(principal, Action.MANAGE_LOYALTY)
    await asyncio.to_thread(loyalty_service.delete_transaction, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
