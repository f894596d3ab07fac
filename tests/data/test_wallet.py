"""Tests for the credit wallet: atomic spend-and-save, grants, refunds."""

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from emlakmetrik.data.wallet import (
    INSUFFICIENT_CREDITS,
    PERSISTENCE_FAILED,
    PROFILE_NOT_FOUND,
    InsufficientCredits,
    ProfileNotFound,
    charge_with_refund,
    credits_for_sku,
    get_balance,
    grant_credits,
    refund_credits,
    spend_and_save,
    spend_credits,
)
from emlakmetrik.models.db import PropertyAnalysis, TransactionType, WalletTransaction


async def _balance(session_factory, user_id):
    async with session_factory() as session:
        return await get_balance(session, user_id)


async def _ledger(session_factory, user_id) -> list[WalletTransaction]:
    async with session_factory() as session:
        result = await session.execute(
            select(WalletTransaction)
            .where(WalletTransaction.user_id == user_id)
            .order_by(WalletTransaction.created_at)
        )
        return list(result.scalars())


async def _analyses(session_factory, user_id) -> list[PropertyAnalysis]:
    async with session_factory() as session:
        result = await session.execute(
            select(PropertyAnalysis).where(PropertyAnalysis.user_id == user_id)
        )
        return list(result.scalars())


async def _spend(session_factory, user_id, **overrides):
    kwargs = dict(
        user_id=user_id,
        title="Moda 2+1",
        location="İstanbul, Kadıköy, Moda",
        price=Decimal("2000000"),
        monthly_rent=Decimal("15000"),
        params={"dues": 500, "results": {"roi": 8.65}},
    )
    kwargs.update(overrides)
    async with session_factory() as session:
        return await spend_and_save(session, **kwargs)


class TestSkuCredits:
    def test_known_products(self):
        assert credits_for_sku("credits_20") == 20
        assert credits_for_sku("credits_100") == 100
        assert credits_for_sku("credits_500") == 500

    def test_unknown_product(self):
        assert credits_for_sku("credits_9999") == 0


# ── Spend and save ───────────────────────────────────────────────

class TestSpendAndSave:
    async def test_success(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=5)
        outcome = await _spend(session_factory, user_id)

        assert outcome.success is True
        assert outcome.new_balance == 4
        assert outcome.property_id is not None
        assert await _balance(session_factory, user_id) == 4

        analyses = await _analyses(session_factory, user_id)
        assert len(analyses) == 1
        assert analyses[0].id == outcome.property_id
        assert analyses[0].params["results"]["roi"] == 8.65
        assert analyses[0].pdf_generated is False

    async def test_ledger_entry(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=5)
        await _spend(session_factory, user_id)

        ledger = await _ledger(session_factory, user_id)
        assert len(ledger) == 1
        assert ledger[0].amount == -1
        assert ledger[0].type == TransactionType.SPEND.value
        assert ledger[0].description == "Analysis for Moda 2+1"

    async def test_custom_cost(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=5)
        outcome = await _spend(session_factory, user_id, cost=3)
        assert outcome.new_balance == 2

    async def test_blank_location_defaulted(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=5)
        await _spend(session_factory, user_id, location="")
        analyses = await _analyses(session_factory, user_id)
        assert analyses[0].location == "Unknown Location"

    async def test_insufficient_creates_nothing(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=0)
        outcome = await _spend(session_factory, user_id)

        assert outcome.success is False
        assert outcome.error == INSUFFICIENT_CREDITS
        assert outcome.new_balance == 0
        assert await _analyses(session_factory, user_id) == []
        assert await _ledger(session_factory, user_id) == []

    async def test_unknown_profile(self, session_factory):
        outcome = await _spend(session_factory, uuid.uuid4())
        assert outcome.success is False
        assert outcome.error == PROFILE_NOT_FOUND

    async def test_failed_insert_rolls_back_deduction(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=5)
        async with session_factory() as session:
            with patch.object(
                AsyncSession,
                "flush",
                new_callable=AsyncMock,
                side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
            ):
                outcome = await spend_and_save(
                    session,
                    user_id=user_id,
                    title="Moda 2+1",
                    location="İstanbul",
                    price=Decimal("2000000"),
                    monthly_rent=Decimal("15000"),
                    params={},
                )

        assert outcome.success is False
        assert outcome.error == PERSISTENCE_FAILED
        assert await _balance(session_factory, user_id) == 5
        assert await _analyses(session_factory, user_id) == []


# ── Grants and refunds ───────────────────────────────────────────

class TestGrants:
    async def test_purchase(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=1)
        async with session_factory() as session:
            balance = await grant_credits(session, user_id, 20, description="IAP purchase: credits_20")

        assert balance == 21
        ledger = await _ledger(session_factory, user_id)
        assert ledger[0].type == TransactionType.DEPOSIT.value
        assert ledger[0].amount == 20

    async def test_reward(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=0)
        async with session_factory() as session:
            balance = await grant_credits(session, user_id, 2, TransactionType.REWARD)

        assert balance == 2
        assert (await _ledger(session_factory, user_id))[0].type == "reward"

    async def test_non_positive_rejected(self, session_factory, make_profile):
        user_id = await make_profile()
        async with session_factory() as session:
            with pytest.raises(ValueError):
                await grant_credits(session, user_id, 0)

    async def test_unknown_profile(self, session_factory):
        async with session_factory() as session:
            with pytest.raises(ProfileNotFound):
                await grant_credits(session, uuid.uuid4(), 20)

    async def test_refund(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=0)
        async with session_factory() as session:
            balance = await refund_credits(session, user_id, 10, "Refund: report")
        assert balance == 10
        assert (await _ledger(session_factory, user_id))[0].type == "refund"


class TestSpendCredits:
    async def test_spend(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=15)
        async with session_factory() as session:
            assert await spend_credits(session, user_id, 10, "PDF report") == 5

    async def test_insufficient_leaves_balance(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=3)
        async with session_factory() as session:
            with pytest.raises(InsufficientCredits) as exc_info:
                await spend_credits(session, user_id, 10)

        assert exc_info.value.balance == 3
        assert exc_info.value.required == 10
        assert await _balance(session_factory, user_id) == 3
        assert await _ledger(session_factory, user_id) == []


class TestChargeWithRefund:
    async def test_success_keeps_charge(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=12)
        action = AsyncMock(return_value="report.pdf")

        result = await charge_with_refund(session_factory, user_id, 10, "PDF report", action)

        assert result == "report.pdf"
        action.assert_awaited_once()
        assert await _balance(session_factory, user_id) == 2

    async def test_failure_refunds(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=12)
        action = AsyncMock(side_effect=RuntimeError("render failed"))

        with pytest.raises(RuntimeError, match="render failed"):
            await charge_with_refund(session_factory, user_id, 10, "PDF report", action)

        assert await _balance(session_factory, user_id) == 12
        ledger = await _ledger(session_factory, user_id)
        assert sorted((t.type, t.amount) for t in ledger) == [("refund", 10), ("spend", -10)]
        refund = next(t for t in ledger if t.type == "refund")
        assert refund.description == "Refund: PDF report"

    async def test_insufficient_never_runs_action(self, session_factory, make_profile):
        user_id = await make_profile(credit_balance=3)
        action = AsyncMock()

        with pytest.raises(InsufficientCredits):
            await charge_with_refund(session_factory, user_id, 10, "PDF report", action)

        action.assert_not_awaited()
