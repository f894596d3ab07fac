"""Analysis routes: preview, save, read back and paid report."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from emlakmetrik.api.deps import get_db, get_regional_provider, get_session_factory
from emlakmetrik.api.schemas import (
    AnalyzeRequest,
    AnalysisResultResponse,
    CreateAnalysisRequest,
    CreateAnalysisResponse,
    ExpenseBreakdownResponse,
    FinancingResponse,
    MarketComparisonResponse,
    PreviewResponse,
    ProjectionPointResponse,
    ReportRequest,
    ReportResponse,
    StoredAnalysisResponse,
    YearlyDebtResponse,
)
from emlakmetrik.config import settings
from emlakmetrik.data.base import RegionalDefaultsSource
from emlakmetrik.data.wallet import (
    INSUFFICIENT_CREDITS,
    PROFILE_NOT_FOUND,
    InsufficientCredits,
    ProfileNotFound,
    charge_with_refund,
    get_balance,
    spend_and_save,
)
from emlakmetrik.engine.analyzer import run_analysis
from emlakmetrik.engine.expenses import expense_shares
from emlakmetrik.engine.loan import amortization_schedule, yearly_debt_summary
from emlakmetrik.engine.normalize import build_analysis_input
from emlakmetrik.models.db import PropertyAnalysis
from emlakmetrik.models.inputs import AnalysisInput
from emlakmetrik.models.params import ParamsBlob, params_blob
from emlakmetrik.models.regional import FALLBACK_DEFAULTS, RegionalDefaults
from emlakmetrik.models.results import AnalysisResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])


async def _compute(
    req: AnalyzeRequest, provider: RegionalDefaultsSource
) -> tuple[AnalysisInput, AnalysisResult, RegionalDefaults]:
    """Resolve regional defaults, normalize the form, run the engine."""
    defaults = await provider.lookup(req.location) if req.location else FALLBACK_DEFAULTS

    inputs = build_analysis_input(
        price=req.price,
        monthly_rent=req.monthly_rent,
        monthly_dues=req.monthly_dues,
        renovation_cost=req.renovation_cost,
        property_area=req.property_area,
        use_loan=req.use_loan,
        down_payment_percent=req.down_payment_percent,
        monthly_interest_rate_percent=req.monthly_interest_rate_percent,
        term_months=req.term_months,
        appreciation_rate_percent=req.appreciation_rate_percent,
        defaults=defaults,
        projection_offsets=tuple(req.projection_offsets),
    )
    return inputs, run_analysis(inputs, base_year=req.base_year), defaults


def _result_to_response(result: AnalysisResult) -> AnalysisResultResponse:
    """Convert engine AnalysisResult to API response."""
    market = None
    if result.market is not None:
        m = result.market
        market = MarketComparisonResponse(
            price_per_area=m.price_per_area,
            benchmark_price_per_area=m.benchmark_price_per_area,
            difference_percent=m.difference_percent,
            is_below_market=m.is_below_market,
        )

    e = result.annual_expenses
    f = result.financing
    return AnalysisResultResponse(
        loan_amount=result.loan_amount,
        down_payment=result.down_payment,
        monthly_loan_payment=result.monthly_loan_payment,
        transfer_tax=result.transfer_tax,
        total_initial_cost=result.total_initial_cost,
        total_property_cost=result.total_property_cost,
        monthly_expenses=result.monthly_expenses,
        net_monthly_income=result.net_monthly_income,
        amortization_years=result.amortization_years,
        cash_on_cash_return_percent=result.cash_on_cash_return_percent,
        gross_roi_percent=result.gross_roi_percent,
        headline_roi_percent=result.headline_roi_percent,
        market=market,
        projection=[
            ProjectionPointResponse(year_offset=p.year_offset, year=p.year, value=p.value)
            for p in result.projection
        ],
        annual_expenses=ExpenseBreakdownResponse(
            property_tax=e.property_tax,
            maintenance=e.maintenance,
            dues=e.dues,
            total=e.total,
            shares=expense_shares(e),
        ),
        meets_roi_target=result.meets_roi_target,
        meets_amortization_target=result.meets_amortization_target,
        appreciation_rate_percent=result.appreciation_rate_percent,
        financing=FinancingResponse(
            use_loan=f.use_loan,
            down_payment_percent=f.down_payment_percent,
            monthly_interest_rate_percent=f.monthly_interest_rate_percent,
            term_months=f.term_months,
        ),
        policy_version=result.policy_version,
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview(
    req: AnalyzeRequest,
    provider: RegionalDefaultsSource = Depends(get_regional_provider),
):
    """Compute an analysis without spending credits or saving anything."""
    inputs, result, defaults = await _compute(req, provider)

    loan_schedule = []
    if inputs.financing.use_loan:
        schedule = amortization_schedule(
            result.loan_amount, inputs.financing.monthly_rate, inputs.financing.term_months
        )
        loan_schedule = [
            YearlyDebtResponse(
                year=y.year,
                principal=y.principal,
                interest=y.interest,
                debt_service=y.debt_service,
                ending_balance=y.ending_balance,
            )
            for y in yearly_debt_summary(schedule)
        ]

    return PreviewResponse(
        result=_result_to_response(result),
        match_level=defaults.match_level.value,
        data_source=defaults.data_source,
        loan_schedule=loan_schedule,
    )


@router.post("", response_model=CreateAnalysisResponse, status_code=201)
async def create_analysis(
    req: CreateAnalysisRequest,
    db: AsyncSession = Depends(get_db),
    provider: RegionalDefaultsSource = Depends(get_regional_provider),
):
    """Compute, then atomically spend one analysis credit and save the record."""
    inputs, result, _ = await _compute(req, provider)

    blob = params_blob(inputs, result)
    title = req.title or f"Property {inputs.price}"
    outcome = await spend_and_save(
        db,
        user_id=req.user_id,
        title=title,
        location=req.location,
        price=inputs.price,
        monthly_rent=inputs.monthly_rent,
        params=blob.to_json(),
    )

    if not outcome.success:
        logger.warning("Analysis not saved for user %s: %s", req.user_id, outcome.error)
        if outcome.error == INSUFFICIENT_CREDITS:
            raise HTTPException(status_code=402, detail="Insufficient credits")
        if outcome.error == PROFILE_NOT_FOUND:
            raise HTTPException(status_code=404, detail="Profile not found")
        raise HTTPException(status_code=503, detail="Could not save analysis, please retry")

    return CreateAnalysisResponse(
        property_id=outcome.property_id,
        new_balance=outcome.new_balance,
        result=_result_to_response(result),
    )


@router.get("/{property_id}", response_model=StoredAnalysisResponse)
async def get_analysis(property_id: UUID, db: AsyncSession = Depends(get_db)):
    """Read a stored analysis back, tolerating older blob shapes."""
    record = await db.get(PropertyAnalysis, property_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Analysis not found")

    return StoredAnalysisResponse(
        id=record.id,
        title=record.title,
        location=record.location,
        price=record.price,
        monthly_rent=record.monthly_rent,
        pdf_generated=record.pdf_generated,
        created_at=record.created_at,
        params=ParamsBlob.model_validate(record.params or {}),
    )


@router.post("/{property_id}/report", response_model=ReportResponse)
async def create_report(
    property_id: UUID,
    req: ReportRequest,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Charge for a PDF report and return the blob it is rendered from.

    Rendering happens on the client. If the analysis cannot be loaded the
    charge is refunded.
    """
    async def mark_generated() -> ParamsBlob:
        async with session_factory() as session:
            async with session.begin():
                record = await session.get(PropertyAnalysis, property_id)
                if record is None or record.user_id != req.user_id:
                    raise LookupError(f"Analysis {property_id} not found")
                record.pdf_generated = True
                return ParamsBlob.model_validate(record.params or {})

    try:
        blob = await charge_with_refund(
            session_factory,
            req.user_id,
            settings.report_credit_cost,
            f"PDF report for {property_id}",
            mark_generated,
        )
    except ProfileNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")
    except InsufficientCredits:
        raise HTTPException(status_code=402, detail="Insufficient credits")
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

    async with session_factory() as session:
        new_balance = await get_balance(session, req.user_id)

    return ReportResponse(property_id=property_id, new_balance=new_balance, params=blob)
