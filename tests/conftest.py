"""Canonical fixtures shared across engine, data and API tests.

Fixture property: 2,000,000 TL flat, 100 m², 15,000 TL/month rent,
500 TL/month dues, no renovation.
Financed variant: 20% down, 2.49%/month, 120 months.
"""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from emlakmetrik.config import settings
from emlakmetrik.models.db import Base, Profile, RegionalDefaultRecord
from emlakmetrik.models.inputs import AnalysisInput, Financing, RegionalBenchmark


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    """Tests never talk to Redis."""
    monkeypatch.setattr(settings, "cache_enabled", False)


@pytest.fixture
def financed_loan() -> Financing:
    return Financing.loan(
        down_payment_percent=Decimal("20"),
        monthly_interest_rate_percent=Decimal("2.49"),
        term_months=120,
    )


@pytest.fixture
def financed_input(financed_loan) -> AnalysisInput:
    """Financed purchase with a shortfall: the installment exceeds the rent."""
    return AnalysisInput(
        price=Decimal("2000000"),
        monthly_rent=Decimal("15000"),
        monthly_dues=Decimal("500"),
        renovation_cost=Decimal("0"),
        property_area=Decimal("100"),
        financing=financed_loan,
        appreciation_rate_percent=Decimal("50"),
    )


@pytest.fixture
def cash_input() -> AnalysisInput:
    """Same property bought outright."""
    return AnalysisInput(
        price=Decimal("2000000"),
        monthly_rent=Decimal("15000"),
        monthly_dues=Decimal("500"),
        renovation_cost=Decimal("0"),
        property_area=Decimal("100"),
        financing=Financing.cash(),
        appreciation_rate_percent=Decimal("50"),
    )


@pytest.fixture
def benchmark() -> RegionalBenchmark:
    return RegionalBenchmark(avg_price_per_area=Decimal("18000"))


# ── Database ─────────────────────────────────────────────────────

@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
def make_profile(session_factory):
    """Factory for profiles with a given starting balance. Returns the profile id."""
    async def _make(credit_balance: int = 5, full_name: str = "Test User"):
        async with session_factory() as session:
            profile = Profile(full_name=full_name, credit_balance=credit_balance)
            session.add(profile)
            await session.commit()
            return profile.id
    return _make


@pytest.fixture
async def seeded_regions(session_factory):
    """İstanbul at city, district (Kadıköy) and neighborhood (Moda) level."""
    async with session_factory() as session:
        session.add_all([
            RegionalDefaultRecord(
                city="İstanbul",
                avg_price_per_sqm=Decimal("60000"),
                appreciation_rate=Decimal("45"),
                data_source="endeksa",
            ),
            RegionalDefaultRecord(
                city="İstanbul",
                district="Kadıköy",
                avg_price_per_sqm=Decimal("90000"),
                avg_rent_per_sqm=Decimal("450"),
                data_source="endeksa",
            ),
            RegionalDefaultRecord(
                city="İstanbul",
                district="Kadıköy",
                neighborhood="Moda",
                avg_price_per_sqm=Decimal("120000"),
                default_loan_rate=Decimal("3.05"),
                data_source="endeksa",
            ),
        ])
        await session.commit()
