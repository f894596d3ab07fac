"""Analysis orchestrator: runs the loan, cash flow and market calculators in order.

Pure computation. No I/O. AnalysisInput in, AnalysisResult out.
"""

from datetime import date

from emlakmetrik.models.inputs import AnalysisInput
from emlakmetrik.models.policy import CURRENT_POLICY, PolicyConstants
from emlakmetrik.models.results import AnalysisResult, CashFlowFacts

from emlakmetrik.engine.loan import loan_facts
from emlakmetrik.engine.cashflow import cash_flow_facts
from emlakmetrik.engine.expenses import annual_expenses
from emlakmetrik.engine.market import compare_to_market, value_projection


def meets_targets(facts: CashFlowFacts, policy: PolicyConstants) -> tuple[bool, bool]:
    """(ROI target met, amortization target met) against the policy thresholds."""
    roi_ok = facts.headline_roi_percent >= policy.good_roi_threshold
    amortization_ok = 0 < facts.amortization_years <= policy.good_amortization_threshold
    return roi_ok, amortization_ok


def run_analysis(
    inputs: AnalysisInput,
    base_year: int | None = None,
    policy: PolicyConstants = CURRENT_POLICY,
) -> AnalysisResult:
    """Run the complete analysis for one property scenario.

    base_year labels the value projection; it defaults to the current year.
    """
    if base_year is None:
        base_year = date.today().year

    loan = loan_facts(inputs.price, inputs.financing)

    flow = cash_flow_facts(
        price=inputs.price,
        monthly_rent=inputs.monthly_rent,
        monthly_dues=inputs.monthly_dues,
        renovation=inputs.renovation_cost,
        financing=inputs.financing,
        loan=loan,
        policy=policy,
    )

    market = compare_to_market(inputs.price, inputs.property_area, inputs.regional_benchmark)
    projection = value_projection(
        inputs.price,
        inputs.appreciation_rate_percent,
        base_year,
        inputs.projection_offsets,
    )
    expenses = annual_expenses(inputs.price, inputs.monthly_rent, inputs.monthly_dues, policy)
    roi_ok, amortization_ok = meets_targets(flow, policy)

    return AnalysisResult(
        loan_amount=loan.loan_amount,
        down_payment=loan.down_payment,
        monthly_loan_payment=loan.monthly_loan_payment,
        transfer_tax=flow.transfer_tax,
        total_initial_cost=flow.total_initial_cost,
        total_property_cost=flow.total_property_cost,
        monthly_expenses=flow.monthly_expenses,
        net_monthly_income=flow.net_monthly_income,
        amortization_years=flow.amortization_years,
        cash_on_cash_return_percent=flow.cash_on_cash_return_percent,
        gross_roi_percent=flow.gross_roi_percent,
        headline_roi_percent=flow.headline_roi_percent,
        market=market,
        projection=projection,
        annual_expenses=expenses,
        meets_roi_target=roi_ok,
        meets_amortization_target=amortization_ok,
        appreciation_rate_percent=inputs.appreciation_rate_percent,
        financing=inputs.financing,
        policy_version=policy.version,
    )
