from dataclasses import dataclass, field
from decimal import Decimal

from emlakmetrik.models.inputs import Financing


@dataclass(frozen=True)
class LoanFacts:
    loan_amount: Decimal = Decimal("0")
    down_payment: Decimal = Decimal("0")
    monthly_loan_payment: Decimal = Decimal("0")


@dataclass(frozen=True)
class CashFlowFacts:
    transfer_tax: Decimal = Decimal("0")
    total_initial_cost: Decimal = Decimal("0")  # Cash actually deployed
    total_property_cost: Decimal = Decimal("0")  # Full unlevered cost
    monthly_expenses: Decimal = Decimal("0")
    net_monthly_income: Decimal = Decimal("0")  # Negative = shortfall
    amortization_years: Decimal = Decimal("0")
    cash_on_cash_return_percent: Decimal = Decimal("0")
    gross_roi_percent: Decimal = Decimal("0")
    headline_roi_percent: Decimal = Decimal("0")


@dataclass(frozen=True)
class MarketComparison:
    price_per_area: Decimal
    benchmark_price_per_area: Decimal
    difference_percent: Decimal  # Positive = above market
    is_below_market: bool


@dataclass(frozen=True)
class ProjectionPoint:
    year_offset: int
    year: int
    value: Decimal


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Annual expense estimate for the detailed view. Not part of cash flow."""

    property_tax: Decimal = Decimal("0")
    maintenance: Decimal = Decimal("0")
    dues: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


@dataclass(frozen=True)
class AnalysisResult:
    # Loan
    loan_amount: Decimal = Decimal("0")
    down_payment: Decimal = Decimal("0")
    monthly_loan_payment: Decimal = Decimal("0")

    # Costs
    transfer_tax: Decimal = Decimal("0")
    total_initial_cost: Decimal = Decimal("0")
    total_property_cost: Decimal = Decimal("0")

    # Flow
    monthly_expenses: Decimal = Decimal("0")
    net_monthly_income: Decimal = Decimal("0")

    # Returns
    amortization_years: Decimal = Decimal("0")
    cash_on_cash_return_percent: Decimal = Decimal("0")
    gross_roi_percent: Decimal = Decimal("0")
    headline_roi_percent: Decimal = Decimal("0")

    # Market (None when no benchmark or no area)
    market: MarketComparison | None = None

    projection: tuple[ProjectionPoint, ...] = ()
    annual_expenses: ExpenseBreakdown = field(default_factory=ExpenseBreakdown)

    meets_roi_target: bool = False
    meets_amortization_target: bool = False

    # Echoed inputs
    appreciation_rate_percent: Decimal = Decimal("0")
    financing: Financing = field(default_factory=Financing.cash)
    policy_version: int = 1
