"""Pydantic models for regional market defaults."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from emlakmetrik.models.inputs import RegionalBenchmark


class MatchLevel(str, Enum):
    NEIGHBORHOOD = "neighborhood"
    DISTRICT = "district"
    CITY = "city"
    COUNTRY = "country"


FALLBACK_SOURCE = "fallback"


class RegionalDefaults(BaseModel):
    # Location
    city: str
    district: str | None = None
    neighborhood: str | None = None
    match_level: MatchLevel = MatchLevel.COUNTRY

    # Prices
    avg_price_per_sqm: Decimal
    avg_rent_per_sqm: Decimal
    avg_dues: Decimal

    # Growth (annual %)
    appreciation_rate: Decimal
    rent_increase_rate: Decimal

    # Loan defaults
    default_loan_rate: Decimal  # Monthly %
    default_loan_term: int  # Months
    default_down_payment: Decimal  # %

    # Metadata
    data_source: str = FALLBACK_SOURCE
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_fallback(self) -> bool:
        return self.data_source == FALLBACK_SOURCE

    def benchmark(self) -> RegionalBenchmark | None:
        """Benchmark for the engine. None when no regional row matched."""
        if self.is_fallback or self.avg_price_per_sqm <= 0:
            return None
        return RegionalBenchmark(avg_price_per_area=self.avg_price_per_sqm)


# Country-wide averages used when no regional data is available
FALLBACK_DEFAULTS = RegionalDefaults(
    city="Türkiye",
    match_level=MatchLevel.COUNTRY,
    avg_price_per_sqm=Decimal("35000"),
    avg_rent_per_sqm=Decimal("280"),
    avg_dues=Decimal("500"),
    appreciation_rate=Decimal("50"),  # High-inflation market
    rent_increase_rate=Decimal("25"),
    default_loan_rate=Decimal("2.49"),
    default_loan_term=120,
    default_down_payment=Decimal("20"),
)
