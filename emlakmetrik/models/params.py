"""Pydantic models for the stored analysis parameters blob.

The blob is read back verbatim by report rendering, so keys are camelCase and
must never be renamed. Readers tolerate missing fields, JSON nulls and unknown
extra keys. Blobs written before versioning carry only the legacy result keys
(amortization, roi, totalCost, netMonthlyIncome) and are treated as version 1.
"""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from emlakmetrik.models.inputs import AnalysisInput
from emlakmetrik.models.results import AnalysisResult

BLOB_VERSION = 2


def _null_as_zero(value):
    return 0 if value is None else value


Amount = Annotated[float, BeforeValidator(_null_as_zero)]
Count = Annotated[int, BeforeValidator(_null_as_zero)]


class BlobModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class MarketBlob(BlobModel):
    price_per_area: Amount = 0.0
    benchmark_price_per_area: Amount = 0.0
    difference_percent: Amount = 0.0
    is_below_market: bool = False


class ProjectionPointBlob(BlobModel):
    year_offset: int
    year: int
    value: Amount = 0.0


class ExpensesBlob(BlobModel):
    property_tax: Amount = 0.0
    maintenance: Amount = 0.0
    dues: Amount = 0.0
    total: Amount = 0.0


class ResultsBlob(BlobModel):
    loan_amount: Amount = 0.0
    down_payment: Amount = 0.0
    monthly_loan_payment: Amount = 0.0
    transfer_tax: Amount = 0.0
    total_initial_cost: Amount = 0.0
    total_property_cost: Amount = 0.0
    monthly_expenses: Amount = 0.0
    net_monthly_income: Amount = 0.0
    amortization_years: Amount = 0.0
    cash_on_cash_return_percent: Amount = 0.0
    gross_roi_percent: Amount = 0.0
    headline_roi_percent: Amount = 0.0
    market: MarketBlob | None = None
    projection: list[ProjectionPointBlob] = Field(default_factory=list)
    annual_expenses: ExpensesBlob | None = None
    meets_roi_target: bool | None = None
    meets_amortization_target: bool | None = None
    policy_version: int = 1

    # Legacy keys, still read by older report templates
    amortization: float | None = None
    roi: float | None = None
    total_cost: float | None = None

    @model_validator(mode="after")
    def fill_from_legacy(self) -> "ResultsBlob":
        provided = self.model_fields_set
        if "amortization_years" not in provided and self.amortization is not None:
            self.amortization_years = self.amortization
        if "headline_roi_percent" not in provided and self.roi is not None:
            self.headline_roi_percent = self.roi
        if "total_property_cost" not in provided and self.total_cost is not None:
            self.total_property_cost = self.total_cost
        return self


class ParamsBlob(BlobModel):
    version: int = 1
    dues: Amount = 0.0
    renovation: Amount = 0.0
    sqm: Amount = 0.0
    use_loan: bool = False
    loan_rate: Amount = 0.0
    loan_term: Count = 0
    down_payment_percent: Amount = 0.0
    appreciation_rate: Amount = 0.0
    results: ResultsBlob = Field(default_factory=ResultsBlob)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def results_blob(result: AnalysisResult) -> ResultsBlob:
    market = None
    if result.market is not None:
        market = MarketBlob(
            price_per_area=float(result.market.price_per_area),
            benchmark_price_per_area=float(result.market.benchmark_price_per_area),
            difference_percent=float(result.market.difference_percent),
            is_below_market=result.market.is_below_market,
        )

    e = result.annual_expenses
    return ResultsBlob(
        loan_amount=float(result.loan_amount),
        down_payment=float(result.down_payment),
        monthly_loan_payment=float(result.monthly_loan_payment),
        transfer_tax=float(result.transfer_tax),
        total_initial_cost=float(result.total_initial_cost),
        total_property_cost=float(result.total_property_cost),
        monthly_expenses=float(result.monthly_expenses),
        net_monthly_income=float(result.net_monthly_income),
        amortization_years=float(result.amortization_years),
        cash_on_cash_return_percent=float(result.cash_on_cash_return_percent),
        gross_roi_percent=float(result.gross_roi_percent),
        headline_roi_percent=float(result.headline_roi_percent),
        market=market,
        projection=[
            ProjectionPointBlob(year_offset=p.year_offset, year=p.year, value=float(p.value))
            for p in result.projection
        ],
        annual_expenses=ExpensesBlob(
            property_tax=float(e.property_tax),
            maintenance=float(e.maintenance),
            dues=float(e.dues),
            total=float(e.total),
        ),
        meets_roi_target=result.meets_roi_target,
        meets_amortization_target=result.meets_amortization_target,
        policy_version=result.policy_version,
        amortization=float(result.amortization_years),
        roi=float(result.headline_roi_percent),
        total_cost=float(result.total_property_cost),
    )


def params_blob(inputs: AnalysisInput, result: AnalysisResult) -> ParamsBlob:
    """Blob stored alongside an analysis record: echoed inputs plus full results."""
    financing = inputs.financing
    return ParamsBlob(
        version=BLOB_VERSION,
        dues=float(inputs.monthly_dues),
        renovation=float(inputs.renovation_cost),
        sqm=float(inputs.property_area),
        use_loan=financing.use_loan,
        loan_rate=float(financing.monthly_interest_rate_percent) if financing.use_loan else 0.0,
        loan_term=financing.term_months if financing.use_loan else 0,
        down_payment_percent=float(financing.down_payment_percent) if financing.use_loan else 0.0,
        appreciation_rate=float(inputs.appreciation_rate_percent),
        results=results_blob(result),
    )
