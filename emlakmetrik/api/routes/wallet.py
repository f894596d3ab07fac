"""Credit wallet routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from emlakmetrik.api.deps import get_db
from emlakmetrik.api.schemas import PurchaseRequest, RewardRequest, WalletResponse
from emlakmetrik.config import settings
from emlakmetrik.data.wallet import ProfileNotFound, credits_for_sku, get_balance, grant_credits
from emlakmetrik.models.db import TransactionType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/wallet", tags=["wallet"])


@router.get("/{user_id}", response_model=WalletResponse)
async def get_wallet(user_id: UUID, db: AsyncSession = Depends(get_db)):
    balance = await get_balance(db, user_id)
    if balance is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return WalletResponse(user_id=user_id, credit_balance=balance)


@router.post("/purchase", response_model=WalletResponse)
async def purchase(req: PurchaseRequest, db: AsyncSession = Depends(get_db)):
    """Credit a completed in-app purchase.

    Receipt validation happens in the store client; the receipt is only
    recorded on the ledger entry.
    """
    amount = credits_for_sku(req.sku)
    if amount <= 0:
        raise HTTPException(status_code=400, detail=f"Unknown product: {req.sku}")

    try:
        balance = await grant_credits(
            db,
            req.user_id,
            amount,
            TransactionType.DEPOSIT,
            f"IAP purchase: {req.sku} (receipt: {req.receipt[:50]})",
        )
    except ProfileNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")

    logger.info("Granted %s credits to %s for %s", amount, req.user_id, req.sku)
    return WalletResponse(user_id=req.user_id, credit_balance=balance)


@router.post("/reward", response_model=WalletResponse)
async def reward(req: RewardRequest, db: AsyncSession = Depends(get_db)):
    """Credit a watched rewarded video."""
    try:
        balance = await grant_credits(
            db,
            req.user_id,
            settings.rewarded_ad_credits,
            TransactionType.REWARD,
            "Rewarded video",
        )
    except ProfileNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")

    return WalletResponse(user_id=req.user_id, credit_balance=balance)
