from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Financing:
    use_loan: bool = False
    down_payment_percent: Decimal = Decimal("0")  # 10-50
    monthly_interest_rate_percent: Decimal = Decimal("0")  # e.g. 2.49 for 2.49%/month
    term_months: int = 0

    @classmethod
    def cash(cls) -> "Financing":
        return cls(use_loan=False)

    @classmethod
    def loan(
        cls,
        down_payment_percent: Decimal,
        monthly_interest_rate_percent: Decimal,
        term_months: int,
    ) -> "Financing":
        return cls(
            use_loan=True,
            down_payment_percent=down_payment_percent,
            monthly_interest_rate_percent=monthly_interest_rate_percent,
            term_months=term_months,
        )

    @property
    def monthly_rate(self) -> Decimal:
        """Monthly interest rate as a fraction (0.0249 for 2.49%)."""
        return self.monthly_interest_rate_percent / 100


@dataclass(frozen=True)
class RegionalBenchmark:
    avg_price_per_area: Decimal  # Currency per m²


DEFAULT_PROJECTION_OFFSETS: tuple[int, ...] = (0, 2, 4, 6, 8, 10)


@dataclass(frozen=True)
class AnalysisInput:
    price: Decimal = Decimal("0")
    monthly_rent: Decimal = Decimal("0")
    monthly_dues: Decimal = Decimal("0")
    renovation_cost: Decimal = Decimal("0")  # One-time
    property_area: Decimal = Decimal("0")  # m², 0 disables per-area metrics
    financing: Financing = field(default_factory=Financing.cash)
    appreciation_rate_percent: Decimal = Decimal("0")  # Annual
    regional_benchmark: RegionalBenchmark | None = None
    projection_offsets: tuple[int, ...] = DEFAULT_PROJECTION_OFFSETS
