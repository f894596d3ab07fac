"""Credit wallet: atomic spend-and-save, grants, refunds.

The profile balance is only changed inside a transaction that also writes the
matching ledger entry, so the balance and wallet_transactions never diverge.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from emlakmetrik.config import settings
from emlakmetrik.models.db import Profile, PropertyAnalysis, TransactionType, WalletTransaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

INSUFFICIENT_CREDITS = "insufficient_credits"
PROFILE_NOT_FOUND = "profile_not_found"
PERSISTENCE_FAILED = "persistence_failed"

# In-app purchase product id → credits granted
SKU_CREDITS: dict[str, int] = {
    "credits_20": 20,
    "credits_100": 100,
    "credits_500": 500,
}


class WalletError(Exception):
    pass


class ProfileNotFound(WalletError):
    pass


class InsufficientCredits(WalletError):
    def __init__(self, balance: int, required: int):
        super().__init__(f"Balance {balance} is below required {required}")
        self.balance = balance
        self.required = required


@dataclass(frozen=True)
class SpendResult:
    success: bool
    new_balance: int | None = None
    property_id: uuid.UUID | None = None
    error: str | None = None


def credits_for_sku(sku: str) -> int:
    """Credits granted by an in-app purchase product. Unknown products grant 0."""
    return SKU_CREDITS.get(sku, 0)


async def get_balance(session: AsyncSession, user_id: uuid.UUID) -> int | None:
    profile = await session.get(Profile, user_id)
    return None if profile is None else profile.credit_balance


async def spend_and_save(
    session: AsyncSession,
    user_id: uuid.UUID,
    title: str,
    location: str,
    price: Decimal,
    monthly_rent: Decimal,
    params: dict,
    cost: int | None = None,
) -> SpendResult:
    """Deduct the analysis cost and store the analysis in one transaction.

    All-or-nothing: an insufficient balance stores nothing, and a failed
    insert rolls the deduction back.
    """
    if cost is None:
        cost = settings.analysis_credit_cost

    try:
        async with session.begin():
            profile = await session.get(Profile, user_id, with_for_update=True)
            if profile is None:
                return SpendResult(success=False, error=PROFILE_NOT_FOUND)
            if profile.credit_balance < cost:
                return SpendResult(
                    success=False, new_balance=profile.credit_balance, error=INSUFFICIENT_CREDITS
                )

            profile.credit_balance -= cost
            record = PropertyAnalysis(
                user_id=user_id,
                title=title,
                location=location or "Unknown Location",
                price=price,
                monthly_rent=monthly_rent,
                params=params,
            )
            session.add(record)
            session.add(WalletTransaction(
                user_id=user_id,
                amount=-cost,
                type=TransactionType.SPEND.value,
                description=f"Analysis for {title}",
            ))
            await session.flush()

            new_balance = profile.credit_balance
            property_id = record.id
    except SQLAlchemyError as e:
        logger.error("Spend-and-save failed for user %s: %s", user_id, e)
        return SpendResult(success=False, error=PERSISTENCE_FAILED)

    logger.info("Saved analysis %s for user %s, balance now %s", property_id, user_id, new_balance)
    return SpendResult(success=True, new_balance=new_balance, property_id=property_id)


async def _apply(
    session: AsyncSession,
    user_id: uuid.UUID,
    amount: int,
    kind: TransactionType,
    description: str,
) -> int:
    async with session.begin():
        profile = await session.get(Profile, user_id, with_for_update=True)
        if profile is None:
            raise ProfileNotFound(str(user_id))
        if profile.credit_balance + amount < 0:
            raise InsufficientCredits(profile.credit_balance, -amount)

        profile.credit_balance += amount
        session.add(WalletTransaction(
            user_id=user_id,
            amount=amount,
            type=kind.value,
            description=description,
        ))
        new_balance = profile.credit_balance

    return new_balance


async def grant_credits(
    session: AsyncSession,
    user_id: uuid.UUID,
    amount: int,
    kind: TransactionType = TransactionType.DEPOSIT,
    description: str = "",
) -> int:
    """Add credits (purchase, reward or refund). Returns the new balance."""
    if amount <= 0:
        raise ValueError("amount must be > 0")
    return await _apply(session, user_id, amount, kind, description)


async def spend_credits(
    session: AsyncSession,
    user_id: uuid.UUID,
    cost: int,
    description: str = "",
) -> int:
    """Deduct credits for a paid action. Raises InsufficientCredits."""
    if cost <= 0:
        raise ValueError("cost must be > 0")
    return await _apply(session, user_id, -cost, TransactionType.SPEND, description)


async def refund_credits(
    session: AsyncSession,
    user_id: uuid.UUID,
    amount: int,
    description: str = "",
) -> int:
    return await grant_credits(session, user_id, amount, TransactionType.REFUND, description)


async def charge_with_refund(
    session_factory: async_sessionmaker[AsyncSession],
    user_id: uuid.UUID,
    cost: int,
    description: str,
    action: Callable[[], Awaitable[T]],
) -> T:
    """Charge for a paid action (e.g. report generation), refunding if it fails."""
    async with session_factory() as session:
        await spend_credits(session, user_id, cost, description)

    try:
        return await action()
    except Exception:
        logger.warning("Paid action failed for user %s, refunding %s credits", user_id, cost)
        async with session_factory() as session:
            await refund_credits(session, user_id, cost, f"Refund: {description}")
        raise
