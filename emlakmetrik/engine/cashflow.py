"""Cash flow and return metrics: costs, net income, amortization, ROI.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from emlakmetrik.models.inputs import Financing
from emlakmetrik.models.policy import CURRENT_POLICY, PolicyConstants
from emlakmetrik.models.results import CashFlowFacts, LoanFacts

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or 0 when the denominator is zero or negative."""
    if denominator <= 0:
        return ZERO
    return numerator / denominator


def transfer_tax(price: Decimal, policy: PolicyConstants = CURRENT_POLICY) -> Decimal:
    """One-time deed transfer fee on the purchase price."""
    return (price * policy.transfer_tax_rate).quantize(TWO_PLACES, ROUND_HALF_UP)


def total_initial_cost(down_payment: Decimal, renovation: Decimal, tax: Decimal) -> Decimal:
    """Cash actually deployed at purchase."""
    return down_payment + renovation + tax


def total_property_cost(price: Decimal, renovation: Decimal, tax: Decimal) -> Decimal:
    """Full economic cost, ignoring how the purchase is financed."""
    return price + renovation + tax


def amortization_years(
    monthly_rent: Decimal, monthly_dues: Decimal, property_cost: Decimal
) -> Decimal:
    """Years for rent net of dues to repay the full property cost.

    Debt service is deliberately excluded: this answers how long the rent
    takes to pay for the house, independent of financing.
    """
    annual_operating = (monthly_rent - monthly_dues) * 12
    return safe_divide(property_cost, annual_operating).quantize(TWO_PLACES, ROUND_HALF_UP)


def cash_on_cash_return(net_monthly_income: Decimal, initial_cost: Decimal) -> Decimal:
    """Annual net cash flow / cash invested, as a percentage."""
    return (safe_divide(net_monthly_income * 12, initial_cost) * 100).quantize(
        FOUR_PLACES, ROUND_HALF_UP
    )


def gross_roi(monthly_rent: Decimal, property_cost: Decimal) -> Decimal:
    """Annual gross rent / total unlevered cost, as a percentage."""
    return (safe_divide(monthly_rent * 12, property_cost) * 100).quantize(
        FOUR_PLACES, ROUND_HALF_UP
    )


def headline_roi(financing: Financing, cash_on_cash: Decimal, gross: Decimal) -> Decimal:
    """The ROI shown as primary: cash-on-cash when financed, gross otherwise."""
    return cash_on_cash if financing.use_loan else gross


def cash_flow_facts(
    price: Decimal,
    monthly_rent: Decimal,
    monthly_dues: Decimal,
    renovation: Decimal,
    financing: Financing,
    loan: LoanFacts,
    policy: PolicyConstants = CURRENT_POLICY,
) -> CashFlowFacts:
    tax = transfer_tax(price, policy)
    initial = total_initial_cost(loan.down_payment, renovation, tax)
    property_cost = total_property_cost(price, renovation, tax)

    monthly_expenses = monthly_dues + loan.monthly_loan_payment
    net_monthly = monthly_rent - monthly_expenses

    coc = cash_on_cash_return(net_monthly, initial)
    gross = gross_roi(monthly_rent, property_cost)

    return CashFlowFacts(
        transfer_tax=tax,
        total_initial_cost=initial,
        total_property_cost=property_cost,
        monthly_expenses=monthly_expenses,
        net_monthly_income=net_monthly,
        amortization_years=amortization_years(monthly_rent, monthly_dues, property_cost),
        cash_on_cash_return_percent=coc,
        gross_roi_percent=gross,
        headline_roi_percent=headline_roi(financing, coc, gross),
    )
