"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from emlakmetrik.models.inputs import DEFAULT_PROJECTION_OFFSETS
from emlakmetrik.models.params import ParamsBlob

# Form fields arrive as typed text or numbers; both are normalized server-side
RawNumber = str | float | None


# ---- Request schemas ----

class AnalyzeRequest(BaseModel):
    title: str = ""
    location: str = Field("", description='"City, District, Neighborhood"')

    price: RawNumber = None
    monthly_rent: RawNumber = None
    monthly_dues: RawNumber = None
    renovation_cost: RawNumber = None
    property_area: RawNumber = None

    # Financing (missing terms default from regional data)
    use_loan: bool = False
    down_payment_percent: RawNumber = None
    monthly_interest_rate_percent: RawNumber = None
    term_months: RawNumber = None

    appreciation_rate_percent: RawNumber = None
    projection_offsets: list[int] = Field(default_factory=lambda: list(DEFAULT_PROJECTION_OFFSETS))
    base_year: int | None = None


class CreateAnalysisRequest(AnalyzeRequest):
    user_id: UUID


class ReportRequest(BaseModel):
    user_id: UUID


class PurchaseRequest(BaseModel):
    user_id: UUID
    sku: str
    receipt: str = ""


class RewardRequest(BaseModel):
    user_id: UUID


# ---- Response schemas ----

class FinancingResponse(BaseModel):
    use_loan: bool
    down_payment_percent: Decimal
    monthly_interest_rate_percent: Decimal
    term_months: int


class MarketComparisonResponse(BaseModel):
    price_per_area: Decimal
    benchmark_price_per_area: Decimal
    difference_percent: Decimal
    is_below_market: bool


class ProjectionPointResponse(BaseModel):
    year_offset: int
    year: int
    value: Decimal


class ExpenseBreakdownResponse(BaseModel):
    property_tax: Decimal
    maintenance: Decimal
    dues: Decimal
    total: Decimal
    shares: dict[str, Decimal] = {}


class YearlyDebtResponse(BaseModel):
    year: int
    principal: Decimal
    interest: Decimal
    debt_service: Decimal
    ending_balance: Decimal


class AnalysisResultResponse(BaseModel):
    loan_amount: Decimal
    down_payment: Decimal
    monthly_loan_payment: Decimal
    transfer_tax: Decimal
    total_initial_cost: Decimal
    total_property_cost: Decimal
    monthly_expenses: Decimal
    net_monthly_income: Decimal
    amortization_years: Decimal
    cash_on_cash_return_percent: Decimal
    gross_roi_percent: Decimal
    headline_roi_percent: Decimal
    market: MarketComparisonResponse | None = None
    projection: list[ProjectionPointResponse]
    annual_expenses: ExpenseBreakdownResponse
    meets_roi_target: bool
    meets_amortization_target: bool
    appreciation_rate_percent: Decimal
    financing: FinancingResponse
    policy_version: int


class PreviewResponse(BaseModel):
    result: AnalysisResultResponse
    match_level: str
    data_source: str
    loan_schedule: list[YearlyDebtResponse] = []


class CreateAnalysisResponse(BaseModel):
    property_id: UUID
    new_balance: int
    result: AnalysisResultResponse


class StoredAnalysisResponse(BaseModel):
    id: UUID
    title: str
    location: str
    price: Decimal
    monthly_rent: Decimal
    pdf_generated: bool
    created_at: datetime | None = None
    params: ParamsBlob


class ReportResponse(BaseModel):
    property_id: UUID
    new_balance: int | None = None
    params: ParamsBlob


class WalletResponse(BaseModel):
    user_id: UUID
    credit_balance: int
